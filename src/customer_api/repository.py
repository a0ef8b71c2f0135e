import logging
from typing import List, Optional, Tuple
from uuid import UUID

from psycopg2 import DataError, IntegrityError
from psycopg2.errors import UniqueViolation

from .errors import ConstraintViolation, UniquenessConflict
from .records import Customer, CustomerPage

logger = logging.getLogger(__name__)

COLUMNS = "customer_id, given_name, middle_initial, surname, primary_email, contact_number"

# Wire field name -> column
SORTABLE_FIELDS = {
    "customerId": "customer_id",
    "givenName": "given_name",
    "middleInitial": "middle_initial",
    "surname": "surname",
    "primaryEmail": "primary_email",
    "contactNumber": "contact_number",
}


def parse_sort(sort: Optional[str]) -> Tuple[str, str]:
    """Turn ``"field[,asc|desc]"`` into a whitelisted (column, direction) pair."""
    if not sort:
        return "created_at", "ASC"
    field, _, direction = sort.partition(",")
    column = SORTABLE_FIELDS.get(field.strip())
    if column is None:
        raise ConstraintViolation(f"No property '{field.strip()}' found for type 'Customer'")
    direction = (direction.strip() or "asc").upper()
    if direction not in ("ASC", "DESC"):
        raise ConstraintViolation(f"Invalid sort direction '{direction}'; expected ASC or DESC")
    return column, direction


class CustomerRepository:
    def __init__(self, conn):
        self.conn = conn

    def find_all(self) -> List[Customer]:
        with self.conn.cursor() as cur:
            cur.execute(
                f"""
                SELECT {COLUMNS}
                FROM customers
                ORDER BY created_at, customer_id
                """
            )
            rows = cur.fetchall() or []
        return [Customer.from_row(r) for r in rows]

    def find_page(self, page: int, size: int, sort: Optional[str] = None) -> CustomerPage:
        column, direction = parse_sort(sort)
        try:
            with self.conn.cursor() as cur:
                cur.execute("SELECT count(*) AS total FROM customers")
                total = cur.fetchone()["total"]
                # column and direction come from the whitelist above
                cur.execute(
                    f"""
                    SELECT {COLUMNS}
                    FROM customers
                    ORDER BY {column} {direction}, customer_id
                    LIMIT %s OFFSET %s
                    """,
                    (size, page * size),
                )
                rows = cur.fetchall() or []
        except DataError as exc:
            # e.g. an OFFSET past the bigint range
            self.conn.rollback()
            raise ConstraintViolation(str(exc).strip()) from exc
        return CustomerPage(
            page=page,
            size=size,
            total_elements=total,
            content=[Customer.from_row(r) for r in rows],
        )

    def find_by_id(self, customer_id: UUID) -> Optional[Customer]:
        with self.conn.cursor() as cur:
            cur.execute(
                f"""
                SELECT {COLUMNS}
                FROM customers
                WHERE customer_id = %s
                """,
                (customer_id,),
            )
            row = cur.fetchone()
        return Customer.from_row(row) if row else None

    def find_by_email(self, email: str) -> Optional[Customer]:
        with self.conn.cursor() as cur:
            cur.execute(
                f"""
                SELECT {COLUMNS}
                FROM customers
                WHERE primary_email = %s
                """,
                (email,),
            )
            row = cur.fetchone()
        return Customer.from_row(row) if row else None

    def exists_by_id(self, customer_id: UUID) -> bool:
        with self.conn.cursor() as cur:
            cur.execute(
                "SELECT 1 FROM customers WHERE customer_id = %s",
                (customer_id,),
            )
            return cur.fetchone() is not None

    def save(self, customer: Customer) -> Customer:
        """Insert a new customer, or overwrite the stored one with the same id."""
        values = (
            customer.given_name,
            customer.middle_initial,
            customer.surname,
            customer.primary_email,
            customer.contact_number,
        )
        try:
            with self.conn.cursor() as cur:
                if customer.customer_id is None:
                    cur.execute(
                        f"""
                        INSERT INTO customers (given_name, middle_initial, surname, primary_email, contact_number)
                        VALUES (%s, %s, %s, %s, %s)
                        RETURNING {COLUMNS}
                        """,
                        values,
                    )
                else:
                    cur.execute(
                        f"""
                        INSERT INTO customers (customer_id, given_name, middle_initial, surname, primary_email, contact_number)
                        VALUES (%s, %s, %s, %s, %s, %s)
                        ON CONFLICT (customer_id) DO UPDATE
                        SET given_name = EXCLUDED.given_name,
                            middle_initial = EXCLUDED.middle_initial,
                            surname = EXCLUDED.surname,
                            primary_email = EXCLUDED.primary_email,
                            contact_number = EXCLUDED.contact_number
                        RETURNING {COLUMNS}
                        """,
                        (customer.customer_id,) + values,
                    )
                row = cur.fetchone()
            self.conn.commit()
        except UniqueViolation as exc:
            self.conn.rollback()
            raise UniquenessConflict(str(exc).strip()) from exc
        except (IntegrityError, DataError) as exc:
            self.conn.rollback()
            raise ConstraintViolation(str(exc).strip()) from exc
        return Customer.from_row(row)

    def delete_by_id(self, customer_id: UUID) -> None:
        with self.conn.cursor() as cur:
            cur.execute(
                """
                DELETE FROM customers
                WHERE customer_id = %s
                """,
                (customer_id,),
            )
            deleted = cur.rowcount
        self.conn.commit()
        logger.debug("Deleted %s row(s) for customer %s", deleted, customer_id)
