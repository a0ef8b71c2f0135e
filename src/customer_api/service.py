import logging
from dataclasses import replace
from typing import List, Optional
from uuid import UUID

from .errors import NotFound
from .records import Customer, CustomerPage

logger = logging.getLogger(__name__)


class CustomerService:
    """Customer use cases on top of a repository.

    The repository is anything with the ``CustomerRepository`` methods; the
    service never talks to the database itself.
    """

    def __init__(self, repository):
        self.repository = repository

    def create(self, customer: Customer) -> Customer:
        # ids are always assigned by the store
        created = self.repository.save(replace(customer, customer_id=None))
        logger.info("Created customer %s", created.customer_id)
        return created

    def list_all(self) -> List[Customer]:
        return self.repository.find_all()

    def list_page(self, page: int, size: int, sort: Optional[str] = None) -> CustomerPage:
        return self.repository.find_page(page, size, sort)

    def get_by_id(self, customer_id: UUID) -> Optional[Customer]:
        return self.repository.find_by_id(customer_id)

    def update(self, customer_id: UUID, new_data: Customer) -> Customer:
        """Full replace: every business field comes from ``new_data``, the id is kept."""
        existing = self.repository.find_by_id(customer_id)
        if existing is None:
            raise NotFound("Customer", "id", customer_id)

        existing.given_name = new_data.given_name
        existing.middle_initial = new_data.middle_initial
        existing.surname = new_data.surname
        existing.primary_email = new_data.primary_email
        existing.contact_number = new_data.contact_number

        updated = self.repository.save(existing)
        logger.info("Updated customer %s", customer_id)
        return updated

    def delete_by_id(self, customer_id: UUID) -> None:
        if not self.repository.exists_by_id(customer_id):
            raise NotFound("Customer", "id", customer_id)
        self.repository.delete_by_id(customer_id)
        logger.info("Deleted customer %s", customer_id)
