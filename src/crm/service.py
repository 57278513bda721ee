import logging
from typing import Any, Dict, List

from .errors import DuplicateResourceError, RequestValidationError, ResourceNotFoundError
from .models import Customer, CustomerRegistrationRequest, CustomerUpdateRequest
from .repository import CustomerRepository

logger = logging.getLogger(__name__)


class CustomerService:
    """Business rules for customers, independent of the storage backend."""

    def __init__(self, repository: CustomerRepository):
        self.repository = repository

    def get_all_customers(self) -> List[Customer]:
        return self.repository.list_all()

    def get_customer_by_id(self, customer_id: int) -> Customer:
        customer = self.repository.get_by_id(customer_id)
        if customer is None:
            raise ResourceNotFoundError(customer_id)
        return customer

    def _ensure_email_available(self, email: str) -> None:
        if self.repository.exists_by_email(email):
            logger.warning("Rejected email already in use: %s", email)
            raise DuplicateResourceError()

    def add_customer(self, request: CustomerRegistrationRequest) -> Customer:
        email = str(request.email)
        self._ensure_email_available(email)

        customer = Customer(name=request.name, email=email, age=request.age)
        created = self.repository.insert(customer)
        logger.info("Registered customer id=%s", created.id)
        return created

    def delete_customer_by_id(self, customer_id: int) -> None:
        if not self.repository.exists_by_id(customer_id):
            logger.warning("Delete of unknown customer id=%s", customer_id)
            raise ResourceNotFoundError(customer_id)

        self.repository.delete_by_id(customer_id)
        logger.info("Deleted customer id=%s", customer_id)

    def update_customer(self, customer_id: int, request: CustomerUpdateRequest) -> Customer:
        customer = self.get_customer_by_id(customer_id)
        changes: Dict[str, Any] = {}

        if request.name is not None and request.name != customer.name:
            changes["name"] = request.name

        if request.email is not None and str(request.email) != customer.email:
            self._ensure_email_available(str(request.email))
            changes["email"] = str(request.email)

        if request.age is not None and request.age != customer.age:
            changes["age"] = request.age

        if not changes:
            logger.warning("Update of customer id=%s had no changes", customer_id)
            raise RequestValidationError()

        updated = customer.model_copy(update=changes)
        self.repository.update(updated)
        logger.info("Updated customer id=%s fields=%s", customer_id, sorted(changes))
        return updated
