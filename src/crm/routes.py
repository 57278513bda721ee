from functools import lru_cache
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from . import config
from .errors import DuplicateResourceError, RequestValidationError, ResourceNotFoundError
from .models import CustomerOut, CustomerRegistrationRequest, CustomerUpdateRequest, PingPong
from .repository import CustomerRepository, create_repository
from .service import CustomerService

router = APIRouter()
ping_router = APIRouter()


@lru_cache
def get_repository() -> CustomerRepository:
    return create_repository(config.CUSTOMER_STORAGE)


def get_customer_service(repository: CustomerRepository = Depends(get_repository)) -> CustomerService:
    return CustomerService(repository)


@ping_router.get("/ping", response_model=PingPong)
def ping_endpoint():
    return {"pingPong": "Pong"}


@router.get("/customers", response_model=List[CustomerOut])
def list_customers_endpoint(service: CustomerService = Depends(get_customer_service)):
    return service.get_all_customers()


@router.get("/customers/{customer_id}", response_model=CustomerOut)
def get_customer_endpoint(customer_id: int, service: CustomerService = Depends(get_customer_service)):
    try:
        return service.get_customer_by_id(customer_id)
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/customers", response_model=CustomerOut, status_code=201)
def register_customer_endpoint(
    payload: CustomerRegistrationRequest,
    service: CustomerService = Depends(get_customer_service),
):
    try:
        return service.add_customer(payload)
    except DuplicateResourceError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/customers/{customer_id}", response_model=CustomerOut)
def update_customer_endpoint(
    customer_id: int,
    payload: CustomerUpdateRequest,
    service: CustomerService = Depends(get_customer_service),
):
    try:
        return service.update_customer(customer_id, payload)
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateResourceError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RequestValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/customers/{customer_id}", status_code=204)
def delete_customer_endpoint(customer_id: int, service: CustomerService = Depends(get_customer_service)):
    try:
        service.delete_customer_by_id(customer_id)
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
