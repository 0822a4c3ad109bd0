"""Customer routes."""

import logging

from fastapi import APIRouter, BackgroundTasks, Request
from fastapi.responses import Response

from restopos.api.deps import AppConfigDep, Repo
from restopos.core.exceptions import NotFoundError
from restopos.core.rate_limit import limiter
from restopos.core.responses import list_response
from restopos.schemas.customer import Customer, CustomerCreate, CustomerUpdate
from restopos.services.email_service import get_email_service
from restopos.services.ids import new_customer_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
@limiter.limit("60/minute")
def list_customers(request: Request, repo: Repo):
    return list_response(repo.get_customers())


@router.post("/", response_model=Customer, status_code=201)
@limiter.limit("30/minute")
def create_customer(
    request: Request,
    data: CustomerCreate,
    repo: Repo,
    config: AppConfigDep,
    background_tasks: BackgroundTasks,
):
    """Register a customer and send the welcome email."""
    customer = Customer(id=new_customer_id(), **data.model_dump())
    repo.save_customers(repo.get_customers() + [customer])
    background_tasks.add_task(get_email_service().send_welcome_email, customer, config)
    logger.info(f"Customer {customer.id} registered")
    return customer


@router.put("/{customer_id}", response_model=Customer)
@limiter.limit("30/minute")
def update_customer(request: Request, customer_id: str, data: CustomerUpdate, repo: Repo):
    """Edit contact details. Loyalty points only change through orders."""
    customers = repo.get_customers()
    for index, customer in enumerate(customers):
        if customer.id == customer_id:
            customers[index] = Customer.model_validate(
                {**customer.model_dump(), **data.model_dump(exclude_unset=True, exclude_none=True)}
            )
            repo.save_customers(customers)
            return customers[index]
    raise NotFoundError("Customer", customer_id)


@router.delete("/{customer_id}", status_code=204)
@limiter.limit("30/minute")
def delete_customer(request: Request, customer_id: str, repo: Repo):
    customers = repo.get_customers()
    remaining = [c for c in customers if c.id != customer_id]
    if len(remaining) == len(customers):
        raise NotFoundError("Customer", customer_id)
    repo.save_customers(remaining)
    return Response(status_code=204)
