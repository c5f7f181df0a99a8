"""
The two walkthroughs of patching a typed ``Person`` record.
"""

import typer

from simple_json_patch.etc.enums import PhoneNumberType
from simple_json_patch.model.json_patch import JsonPatchDocument
from simple_json_patch.model.person import Person, Address, PhoneNumber
from simple_json_patch.patch import PatchErrorLog
from .util import CONSOLE


app = typer.Typer(no_args_is_help=True)

UPDATE_PATCH = """
[
    { "op": "replace", "path": "/FirstName", "value": "Jane" },
    { "op": "remove", "path": "/Email"},
    { "op": "add", "path": "/Address/ZipCode", "value": "90210" },
    { "op": "add", "path": "/PhoneNumbers/-", "value": { "Number": "987-654-3210", "Type": "Work" } }
]
"""

FAILING_PATCH = """
[
    { "op": "replace", "path": "/Email", "value": "janedoe@gmail.com"},
    { "op": "test", "path": "/FirstName", "value": "Jane" },
    { "op": "replace", "path": "/LastName", "value": "Smith" }
]
"""


def update_person() -> Person:
    """
    Replace, remove and add fields, including a nested field and an array append.
    :return: The patched person.
    """
    person = Person(
        first_name='John',
        last_name='Doe',
        email='johndoe@gmail.com',
        phone_numbers=[PhoneNumber(number='123-456-7890', type=PhoneNumberType.MOBILE)],
        address=Address(
            street='123 Main St',
            city='Anytown',
            state='TX',
        ),
    )

    JsonPatchDocument.from_json(UPDATE_PATCH).apply_to(person)

    return person


def update_person_with_errors() -> tuple[Person, dict[str, list[str]]]:
    """
    Collect errors from a failing ``test`` operation. The person is modified in
    place by the operations around the failed one, and it is up to the caller to
    discard it.
    :return: The patched person and the error messages by affected type.
    """
    person = Person(
        first_name='John',
        last_name='Doe',
        email='johndoe@gmail.com',
    )
    error_log = PatchErrorLog()

    JsonPatchDocument.from_json(FAILING_PATCH).apply_to(person, error_sink=error_log)

    return person, error_log.by_affected_type()


@app.command('person')
def person_command():
    """
    Patch a person record, then show error collection with a failing test operation.
    """
    CONSOLE.rule('Add, replace and remove')
    CONSOLE.print_json(update_person().model_dump_json(exclude_none=True))

    CONSOLE.rule('Collecting errors')
    person, errors = update_person_with_errors()
    for key, messages in errors.items():
        CONSOLE.print(f'Error in {key}: {", ".join(messages)}')
    CONSOLE.print_json(person.model_dump_json(exclude_none=True))
