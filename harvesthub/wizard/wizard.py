"""
Registration wizard - transient, single-session form state.

The wizard owns the form data, the per-state validation rules and the
single submission to the registration endpoint. Nothing is persisted: a
wizard that is dropped halfway simply disappears.
"""

import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass, fields
from typing import Any

from harvesthub.domain.account import AccountType
from harvesthub.domain.validation import (
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    PasswordStrength,
    check_password_strength,
    is_valid_email,
    normalize_uk_mobile,
)

from .client import Enrollment, RegistrationClient, SubmissionFailed
from .machine import SignupMethod, WizardEvent, WizardState, next_state

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/dashboard"


@dataclass
class FormData:
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    password: str = ""
    confirm_password: str = ""
    account_type: AccountType | None = None
    business_name: str = ""
    registration_number: str = ""
    # Not validated or uploaded; the server derives a mock document URL.
    business_document: str | None = None
    phone_number: str = ""
    date_of_birth: str = ""


Errors = dict[str, str]


def _validate_account_type(form: FormData) -> Errors:
    if form.account_type is None:
        return {"account_type": "Please select an account type"}
    return {}


def _validate_email(form: FormData) -> Errors:
    if not form.email:
        return {"email": "Email is required"}
    if not is_valid_email(form.email):
        return {"email": "Please enter a valid email"}
    return {}


def _validate_name(value: str, label: str) -> str | None:
    if not value.strip():
        return f"{label} is required"
    if len(value.strip()) < NAME_MIN_LENGTH:
        return f"{label} must be at least {NAME_MIN_LENGTH} characters"
    if len(value) > NAME_MAX_LENGTH:
        return f"{label} must be at most {NAME_MAX_LENGTH} characters"
    return None


def _validate_personal_info(form: FormData) -> Errors:
    errors: Errors = {}
    for field, label in (("first_name", "First name"), ("last_name", "Last name")):
        problem = _validate_name(getattr(form, field), label)
        if problem:
            errors[field] = problem

    if form.account_type is AccountType.BUSINESS:
        if not form.business_name.strip():
            errors["business_name"] = "Business name is required"
        if not form.registration_number.strip():
            errors["registration_number"] = "Registration number is required"
    elif form.account_type is AccountType.INDIVIDUAL:
        try:
            form.phone_number = normalize_uk_mobile(form.phone_number)
        except ValueError as e:
            errors["phone_number"] = str(e)
        if not form.date_of_birth:
            errors["date_of_birth"] = "Date of birth is required"
    return errors


def _validate_password(form: FormData) -> Errors:
    errors: Errors = {}
    if not form.password:
        errors["password"] = "Password is required"
    elif not check_password_strength(form.password).is_strong:
        errors["password"] = "Password does not meet requirements"
    if not form.confirm_password:
        errors["confirm_password"] = "Please confirm your password"
    elif form.password != form.confirm_password:
        errors["confirm_password"] = "Passwords do not match"
    return errors


STEP_VALIDATORS: dict[WizardState, Callable[[FormData], Errors]] = {
    WizardState.ACCOUNT_TYPE: _validate_account_type,
    WizardState.EMAIL: _validate_email,
    WizardState.PERSONAL_INFO: _validate_personal_info,
    WizardState.PASSWORD: _validate_password,
}


class RegistrationWizard:
    """
    Drives one sign-up session from method selection to the success screen.

    Typical email flow::

        wizard = RegistrationWizard(client)
        wizard.choose_method("email")
        wizard.select_account_type("individual")
        wizard.next()
        wizard.update(email="ada@example.com")
        wizard.next()
        ...
        wizard.submit()
    """

    def __init__(self, client: RegistrationClient) -> None:
        self._client = client
        self.state = WizardState.METHOD_SELECT
        self.method: SignupMethod | None = None
        self.form = FormData()
        self.errors: Errors = {}
        self.enrollment: Enrollment | None = None
        self.submitting = False

    @property
    def step(self) -> int:
        return self.state.step

    @property
    def password_strength(self) -> PasswordStrength:
        return check_password_strength(self.form.password)

    def _fire(self, event: WizardEvent) -> WizardState:
        self.state = next_state(self.state, event)
        return self.state

    def choose_method(self, method: SignupMethod | str) -> WizardState:
        """Pick email or a social provider on the first screen."""
        method = SignupMethod(method)
        event = WizardEvent.CHOOSE_SOCIAL if method.is_social else WizardEvent.CHOOSE_EMAIL
        state = self._fire(event)
        self.method = method
        if method.is_social:
            logger.info("Social sign-up with %s is not implemented; showing stub", method.value)
        return state

    def select_account_type(self, account_type: AccountType | str) -> None:
        self.form.account_type = AccountType(account_type)
        self.errors.pop("account_type", None)

    def update(self, **values: Any) -> None:
        """Set form fields by name; unknown names raise ``TypeError``."""
        known = {field.name for field in fields(FormData)}
        unknown = set(values) - known
        if unknown:
            raise TypeError(f"Unknown form fields: {', '.join(sorted(unknown))}")
        for name, value in values.items():
            setattr(self.form, name, value)

    def validate(self) -> bool:
        """Run the current state's rules, replacing ``errors``."""
        validator = STEP_VALIDATORS.get(self.state)
        self.errors = validator(self.form) if validator else {}
        return not self.errors

    def next(self) -> bool:
        """
        Advance one state if the current one validates.

        Returns:
            True if the wizard moved forward
        """
        if not self.validate():
            return False
        self._fire(WizardEvent.NEXT)
        return True

    def back(self) -> WizardState:
        self.errors = {}
        return self._fire(WizardEvent.BACK)

    def build_payload(self) -> dict[str, Any]:
        """Request body for the registration endpoint."""
        data = asdict(self.form)
        is_business = self.form.account_type is AccountType.BUSINESS
        is_individual = self.form.account_type is AccountType.INDIVIDUAL
        return {
            "email": data["email"],
            "password": data["password"],
            "firstName": data["first_name"],
            "lastName": data["last_name"],
            "phoneNumber": data["phone_number"] if is_individual else None,
            "dateOfBirth": data["date_of_birth"] if is_individual else None,
            "accountType": self.form.account_type.value if self.form.account_type else None,
            "businessName": data["business_name"] if is_business else None,
            "registrationNumber": data["registration_number"] if is_business else None,
        }

    def submit(self) -> bool:
        """
        Validate the password step and send the registration.

        On failure the server's message is shown on the password field and
        the wizard stays where it is with all entered data intact.

        Returns:
            True if the account was created and the wizard reached SUCCESS
        """
        if self.state is not WizardState.PASSWORD:
            raise RuntimeError(f"Cannot submit from state {self.state.value}")
        if self.submitting:
            return False
        if not self.validate():
            return False

        self.submitting = True
        try:
            self.enrollment = self._client.register(self.build_payload())
        except SubmissionFailed as e:
            self.errors = {**self.errors, "password": str(e)}
            return False
        finally:
            self.submitting = False

        self._fire(WizardEvent.SUBMITTED)
        return True

    def finish(self) -> str:
        """Leave a terminal screen; returns where to navigate."""
        if not self.state.is_terminal:
            raise RuntimeError(f"Cannot finish from state {self.state.value}")
        return DASHBOARD_PATH
