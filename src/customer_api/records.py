from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional
from uuid import UUID


@dataclass
class Customer:
    given_name: str
    surname: str
    primary_email: str
    contact_number: str
    middle_initial: Optional[str] = None
    customer_id: Optional[UUID] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Customer":
        customer_id = row["customer_id"]
        return cls(
            customer_id=customer_id if isinstance(customer_id, UUID) else UUID(str(customer_id)),
            given_name=row["given_name"],
            middle_initial=row["middle_initial"],
            surname=row["surname"],
            primary_email=row["primary_email"],
            contact_number=row["contact_number"],
        )


@dataclass
class CustomerPage:
    page: int
    size: int
    total_elements: int
    content: List[Customer] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return -(-self.total_elements // self.size)
