import copy
import jsonpatch
import pytest

from simple_json_patch.patch import (JsonPatchEngine, apply_patch, PathNotFoundError, IndexOutOfRangeError,
                                     TestFailedError, TypeMismatchError, InvalidOperationError)


@pytest.fixture
def document():
    return {
        'name': 'registry',
        'tags': ['a', 'b', 'c'],
        'owner': {'name': 'Jane', 'roles': ['admin']},
        'count': 3,
        'enabled': True,
        'nothing': None,
    }


def test_add_object_field_leaves_siblings(document):
    expected = copy.deepcopy(document)
    apply_patch(document, [{'op': 'add', 'path': '/owner/email', 'value': 'jane@example.org'}])

    assert document['owner']['email'] == 'jane@example.org'
    del document['owner']['email']
    assert document == expected


def test_add_overwrites_existing_field(document):
    apply_patch(document, [{'op': 'add', 'path': '/count', 'value': {'total': 4}}])

    assert document['count'] == {'total': 4}


def test_add_appends_with_dash_and_shifts_indices(document):
    apply_patch(document, [
        {'op': 'add', 'path': '/tags/-', 'value': 'd'},
        {'op': 'add', 'path': '/tags/0', 'value': 'z'},
        {'op': 'replace', 'path': '/tags/4', 'value': 'D'},
    ])

    assert document['tags'] == ['z', 'a', 'b', 'c', 'D']


def test_add_at_end_index(document):
    apply_patch(document, [{'op': 'add', 'path': '/tags/3', 'value': 'd'}])

    assert document['tags'] == ['a', 'b', 'c', 'd']


def test_add_beyond_end_fails(document):
    with pytest.raises(IndexOutOfRangeError):
        apply_patch(document, [{'op': 'add', 'path': '/tags/4', 'value': 'x'}])

    assert document['tags'] == ['a', 'b', 'c']


def test_add_with_missing_parent_fails(document):
    with pytest.raises(PathNotFoundError):
        apply_patch(document, [{'op': 'add', 'path': '/missing/child', 'value': 1}])


def test_add_null_value_is_valid(document):
    apply_patch(document, [{'op': 'add', 'path': '/owner/email', 'value': None}])

    assert 'email' in document['owner']
    assert document['owner']['email'] is None


def test_add_then_remove_restores_document(document):
    expected = copy.deepcopy(document)
    apply_patch(document, [
        {'op': 'add', 'path': '/tags/1', 'value': 'x'},
        {'op': 'remove', 'path': '/tags/1'},
        {'op': 'add', 'path': '/extra', 'value': [1, 2]},
        {'op': 'remove', 'path': '/extra'},
    ])

    assert document == expected


def test_added_value_is_not_shared_with_patch(document):
    value = {'nested': [1]}
    patch = [{'op': 'add', 'path': '/extra', 'value': value}]
    apply_patch(document, patch)
    value['nested'].append(2)

    assert document['extra'] == {'nested': [1]}


def test_remove_shifts_elements_left(document):
    apply_patch(document, [{'op': 'remove', 'path': '/tags/0'}])

    assert document['tags'] == ['b', 'c']


def test_remove_field(document):
    apply_patch(document, [{'op': 'remove', 'path': '/owner/roles'}])

    assert document['owner'] == {'name': 'Jane'}


@pytest.mark.parametrize('path, error', [
    ('/missing', PathNotFoundError),
    ('/tags/3', IndexOutOfRangeError),
    ('/tags/-', IndexOutOfRangeError),
    ('/tags/01', IndexOutOfRangeError),
    ('/name/first', PathNotFoundError),
    ('/nothing/x', PathNotFoundError),
    ('', InvalidOperationError),
])
def test_remove_invalid_location(document, path, error):
    expected = copy.deepcopy(document)

    with pytest.raises(error):
        apply_patch(document, [{'op': 'remove', 'path': path}])

    assert document == expected


def test_replace_value_of_different_type(document):
    apply_patch(document, [{'op': 'replace', 'path': '/enabled', 'value': 'yes'}])

    assert document['enabled'] == 'yes'


def test_replace_requires_existing_location(document):
    with pytest.raises(PathNotFoundError):
        apply_patch(document, [{'op': 'replace', 'path': '/missing', 'value': 1}])

    assert 'missing' not in document


def test_replace_root_keeps_reference(document):
    target = document
    apply_patch(document, [{'op': 'replace', 'path': '', 'value': {'fresh': True}}])

    assert target is document
    assert document == {'fresh': True}


def test_replace_root_with_wrong_shape(document):
    with pytest.raises(TypeMismatchError):
        apply_patch(document, [{'op': 'replace', 'path': '', 'value': [1, 2]}])


def test_root_list_document():
    target = [1, 2, 3]
    apply_patch(target, [
        {'op': 'remove', 'path': '/0'},
        {'op': 'add', 'path': '/-', 'value': 4},
        {'op': 'test', 'path': '', 'value': [2, 3, 4]},
    ])

    assert target == [2, 3, 4]


def test_escaped_keys():
    target = {'a/b': {'m~n': 1}}
    apply_patch(target, [{'op': 'replace', 'path': '/a~1b/m~0n', 'value': 2}])

    assert target == {'a/b': {'m~n': 2}}


def test_test_operation_never_mutates(document):
    expected = copy.deepcopy(document)
    apply_patch(document, [{'op': 'test', 'path': '/owner', 'value': {'roles': ['admin'], 'name': 'Jane'}}])

    with pytest.raises(TestFailedError):
        apply_patch(document, [{'op': 'test', 'path': '/owner/name', 'value': 'John'}])

    assert document == expected


@pytest.mark.parametrize('path, value', [
    ('/count', 3.0),
    ('/enabled', True),
    ('/nothing', None),
    ('/tags', ['a', 'b', 'c']),
    ('', None),
])
def test_test_operation_json_equality(document, path, value):
    if path == '':
        value = copy.deepcopy(document)

    apply_patch(document, [{'op': 'test', 'path': path, 'value': value}])


@pytest.mark.parametrize('path, value', [
    ('/count', '3'),
    ('/enabled', 1),
    ('/nothing', False),
    ('/tags', ['c', 'b', 'a']),
    ('/owner', {'name': 'Jane'}),
])
def test_test_operation_detects_differences(document, path, value):
    with pytest.raises(TestFailedError):
        apply_patch(document, [{'op': 'test', 'path': path, 'value': value}])


def test_test_missing_location(document):
    with pytest.raises(PathNotFoundError):
        apply_patch(document, [{'op': 'test', 'path': '/missing', 'value': 1}])


def test_move_equals_remove_then_add(document):
    moved = copy.deepcopy(document)
    decomposed = copy.deepcopy(document)

    apply_patch(moved, [{'op': 'move', 'from': '/owner/roles', 'path': '/roles'}])
    apply_patch(decomposed, [
        {'op': 'remove', 'path': '/owner/roles'},
        {'op': 'add', 'path': '/roles', 'value': ['admin']},
    ])

    assert moved == decomposed
    assert moved['roles'] == ['admin']
    assert 'roles' not in moved['owner']


def test_move_within_list(document):
    apply_patch(document, [{'op': 'move', 'from': '/tags/0', 'path': '/tags/-'}])

    assert document['tags'] == ['b', 'c', 'a']


def test_move_to_same_location_is_noop(document):
    expected = copy.deepcopy(document)
    apply_patch(document, [{'op': 'move', 'from': '/owner', 'path': '/owner'}])

    assert document == expected


def test_move_into_own_child_fails(document):
    expected = copy.deepcopy(document)

    with pytest.raises(InvalidOperationError):
        apply_patch(document, [{'op': 'move', 'from': '/owner', 'path': '/owner/roles/0'}])

    assert document == expected


def test_failed_move_leaves_document_unchanged(document):
    expected = copy.deepcopy(document)

    with pytest.raises(PathNotFoundError):
        apply_patch(document, [{'op': 'move', 'from': '/tags/1', 'path': '/missing/tag'}])

    assert document == expected


def test_move_requires_from(document):
    with pytest.raises(InvalidOperationError):
        apply_patch(document, [{'op': 'move', 'path': '/roles'}])


def test_copy_is_deep(document):
    apply_patch(document, [{'op': 'copy', 'from': '/owner', 'path': '/backup'}])
    document['owner']['roles'].append('editor')

    assert document['backup'] == {'name': 'Jane', 'roles': ['admin']}


def test_copy_into_list(document):
    apply_patch(document, [{'op': 'copy', 'from': '/name', 'path': '/tags/1'}])

    assert document['tags'] == ['a', 'registry', 'b', 'c']


def test_copy_from_missing_location(document):
    with pytest.raises(PathNotFoundError):
        apply_patch(document, [{'op': 'copy', 'from': '/missing', 'path': '/backup'}])


@pytest.mark.parametrize('operation', [
    {'op': 'merge', 'path': '/name', 'value': 1},
    {'op': 'add', 'path': '/name'},
    {'op': 'replace', 'path': '/name'},
    {'op': 'test', 'path': '/name'},
    {'op': 'copy', 'path': '/name'},
    {'op': 'add', 'path': 'name', 'value': 1},
])
def test_invalid_operations(document, operation):
    expected = copy.deepcopy(document)

    with pytest.raises(InvalidOperationError):
        apply_patch(document, [operation])

    assert document == expected


def test_fail_fast_keeps_earlier_operations(document):
    with pytest.raises(TestFailedError) as exc_info:
        apply_patch(document, [
            {'op': 'replace', 'path': '/name', 'value': 'changed'},
            {'op': 'test', 'path': '/count', 'value': 4},
            {'op': 'replace', 'path': '/count', 'value': 5},
        ])

    assert document['name'] == 'changed'
    assert document['count'] == 3
    assert exc_info.value.error.operation.path == '/count'
    assert exc_info.value.path == '/count'


def test_dry_run_leaves_target_untouched(document):
    expected = copy.deepcopy(document)
    patched = JsonPatchEngine().apply(document, [{'op': 'remove', 'path': '/tags'}], dry_run=True)

    assert document == expected
    assert 'tags' not in patched


def test_document_given_as_json_string(document):
    apply_patch(document, '[{"op": "replace", "path": "/count", "value": 10}]')

    assert document['count'] == 10


def test_unparsable_document_is_rejected(document):
    with pytest.raises(InvalidOperationError):
        apply_patch(document, '{"op": "add"}')


@pytest.mark.parametrize('patch', [
    [{'op': 'add', 'path': '/owner/roles/1', 'value': 'editor'}],
    [{'op': 'move', 'from': '/tags/2', 'path': '/tags/0'}],
    [{'op': 'copy', 'from': '/owner', 'path': '/tags/-'}],
    [{'op': 'remove', 'path': '/owner/name'}, {'op': 'add', 'path': '/owner/name', 'value': 'Ann'}],
    [{'op': 'replace', 'path': '', 'value': {'a': [1, {'b': 2}]}}, {'op': 'add', 'path': '/a/1/c', 'value': 3}],
])
def test_matches_reference_implementation(document, patch):
    expected = jsonpatch.apply_patch(copy.deepcopy(document), patch)

    assert apply_patch(document, patch) == expected
