"""Interactive command-line client for the Customer API."""
import json
from typing import Any, Dict, Optional

import click

from .client import ApiError, CustomerApiClient, CustomerNotFound

DEFAULT_API_BASE_URL = "http://localhost:8000/customers"

# Typing this at the middle initial prompt of an update clears the stored value
CLEAR_VALUE = "-"

MENU = """
===== MENU =====
1. List all customers
2. Get customer by ID
3. Create new customer
4. Update customer
5. Delete customer
0. Exit"""


def format_json(text: str) -> str:
    """Cosmetic line breaks for a JSON body; not a real pretty printer."""
    return text.replace(",", ",\n  ").replace("{", "{\n  ").replace("}", "\n}")


def _optional(value: str) -> Optional[str]:
    return value or None


def list_all_customers(client: CustomerApiClient) -> None:
    response = client.list_customers()
    click.echo("\nAll Customers:\n" + format_json(response))


def get_customer_by_id(client: CustomerApiClient) -> None:
    customer_id = click.prompt("Enter customer ID").strip()
    try:
        response = client.get_customer(customer_id)
    except CustomerNotFound:
        click.echo(f"Customer not found with ID: {customer_id}")
        return
    click.echo("\nCustomer Details:\n" + format_json(response))


def create_customer(client: CustomerApiClient) -> None:
    click.echo("\nEnter customer details:")
    payload = {
        "givenName": click.prompt("First Name").strip(),
        "middleInitial": _optional(
            click.prompt("Middle Initial (optional, press Enter to skip)", default="", show_default=False).strip()
        ),
        "surname": click.prompt("Last Name").strip(),
        "primaryEmail": click.prompt("Email").strip(),
        "contactNumber": click.prompt("Phone Number").strip(),
    }
    response = client.create_customer(payload)
    click.echo("\nCustomer created successfully:\n" + format_json(response))


def _keep_or_replace(label: str, current: Optional[str]) -> str:
    return click.prompt(label, default=current or "", show_default=bool(current)).strip()


def merge_update(current: Dict[str, Any]) -> Dict[str, Any]:
    """Prompt for each field; an empty answer keeps the current value.

    The result is always a complete record since the server replaces every field.
    """
    given_name = _keep_or_replace("First Name", current.get("givenName"))
    middle_initial = _keep_or_replace(f"Middle Initial ('{CLEAR_VALUE}' to clear)", current.get("middleInitial"))
    return {
        "givenName": given_name,
        "middleInitial": None if middle_initial == CLEAR_VALUE else _optional(middle_initial),
        "surname": _keep_or_replace("Last Name", current.get("surname")),
        "primaryEmail": _keep_or_replace("Email", current.get("primaryEmail")),
        "contactNumber": _keep_or_replace("Phone Number", current.get("contactNumber")),
    }


def update_customer(client: CustomerApiClient) -> None:
    customer_id = click.prompt("Enter customer ID to update").strip()
    try:
        current = client.get_customer(customer_id)
        click.echo("\nCurrent customer data:\n" + format_json(current))

        click.echo("\nEnter updated customer details (press Enter to keep current value):")
        payload = merge_update(json.loads(current))

        response = client.update_customer(customer_id, payload)
    except CustomerNotFound:
        click.echo(f"Customer not found with ID: {customer_id}")
        return
    click.echo("\nCustomer updated successfully:\n" + format_json(response))


def delete_customer(client: CustomerApiClient) -> None:
    customer_id = click.prompt("Enter customer ID to delete").strip()
    try:
        client.delete_customer(customer_id)
    except CustomerNotFound:
        click.echo(f"Customer not found with ID: {customer_id}")
        return
    click.echo("Customer deleted successfully.")


ACTIONS = {
    1: list_all_customers,
    2: get_customer_by_id,
    3: create_customer,
    4: update_customer,
    5: delete_customer,
}


def run_menu(client: CustomerApiClient) -> None:
    while True:
        click.echo(MENU)
        choice = click.prompt("Enter your choice", type=int)
        if choice == 0:
            click.echo("Exiting application. Goodbye!")
            return

        action = ACTIONS.get(choice)
        if action is None:
            click.echo("Invalid choice. Please try again.")
        else:
            try:
                action(client)
            except ApiError as exc:
                click.echo(f"Error communicating with API: {exc}")
            except ValueError as exc:
                click.echo(f"An error occurred: {exc}")
        click.echo()


def make_client(url: str, verbose: bool) -> CustomerApiClient:
    return CustomerApiClient(url, verbose=verbose)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-u",
    "--url",
    default=DEFAULT_API_BASE_URL,
    envvar="CUSTOMER_API_URL",
    show_default=True,
    help="API base URL.",
)
@click.option("-v", "--verbose", is_flag=True, help="Echo every request and response.")
def main(url: str, verbose: bool) -> None:
    """Customer API CLI Client."""
    click.echo("Customer API CLI Client")
    click.echo(f"API URL: {url}")
    if verbose:
        click.echo("Verbose mode enabled")
    click.echo()

    with make_client(url, verbose) as client:
        run_menu(client)


if __name__ == "__main__":
    main()
