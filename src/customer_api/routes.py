from typing import Any, List, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Response

from .config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .db import get_conn
from .errors import NotFound
from .models import CustomerIn, CustomerOut, CustomerPageOut, ErrorResponse
from .repository import CustomerRepository
from .service import CustomerService
from .validation import parse_customer

router = APIRouter(prefix="/customers", tags=["customers"])

BAD_REQUEST = {400: {"model": ErrorResponse, "description": "Invalid input"}}
NOT_FOUND = {404: {"model": ErrorResponse, "description": "Customer not found"}}
CONFLICT = {409: {"model": ErrorResponse, "description": "Email address already in use"}}


def get_customer_service():
    conn = get_conn()
    try:
        yield CustomerService(CustomerRepository(conn))
    finally:
        conn.close()


def customer_payload(body: Any = Body(..., description="Customer information")) -> CustomerIn:
    return parse_customer(body)


@router.post("", response_model=CustomerOut, responses={**BAD_REQUEST, **CONFLICT})
def create_customer_endpoint(
    payload: CustomerIn = Depends(customer_payload),
    service: CustomerService = Depends(get_customer_service),
):
    customer = service.create(payload.to_record())
    return CustomerOut.from_record(customer)


@router.get("", response_model=List[CustomerOut])
def list_customers_endpoint(service: CustomerService = Depends(get_customer_service)):
    return [CustomerOut.from_record(c) for c in service.list_all()]


@router.get("/page", response_model=CustomerPageOut, responses=BAD_REQUEST)
def list_customers_page_endpoint(
    page: int = Query(0, ge=0, description="Zero-based page index"),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    sort: Optional[str] = Query(None, description="Sort spec, e.g. surname,desc"),
    service: CustomerService = Depends(get_customer_service),
):
    result = service.list_page(page, size, sort)
    return CustomerPageOut(
        content=[CustomerOut.from_record(c) for c in result.content],
        page=result.page,
        size=result.size,
        total_elements=result.total_elements,
        total_pages=result.total_pages,
    )


@router.get("/{customer_id}", response_model=CustomerOut, responses={**BAD_REQUEST, **NOT_FOUND})
def get_customer_endpoint(customer_id: UUID, service: CustomerService = Depends(get_customer_service)):
    customer = service.get_by_id(customer_id)
    if customer is None:
        raise NotFound("Customer", "id", customer_id)
    return CustomerOut.from_record(customer)


@router.put(
    "/{customer_id}",
    response_model=CustomerOut,
    responses={**BAD_REQUEST, **NOT_FOUND, **CONFLICT},
)
def update_customer_endpoint(
    customer_id: UUID,
    payload: CustomerIn = Depends(customer_payload),
    service: CustomerService = Depends(get_customer_service),
):
    customer = service.update(customer_id, payload.to_record())
    return CustomerOut.from_record(customer)


@router.delete("/{customer_id}", status_code=204, responses={**BAD_REQUEST, **NOT_FOUND})
def delete_customer_endpoint(customer_id: UUID, service: CustomerService = Depends(get_customer_service)):
    service.delete_by_id(customer_id)
    return Response(status_code=204)
