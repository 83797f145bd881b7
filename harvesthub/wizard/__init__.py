"""
Registration wizard - client-side multi-step sign-up flow.

A UI-free state machine that collects and locally validates account data,
then submits it to the registration endpoint in one request.
"""

from .client import Enrollment, RegistrationClient, SubmissionFailed
from .machine import InvalidTransition, SignupMethod, WizardEvent, WizardState
from .wizard import FormData, RegistrationWizard

__all__ = [
    "Enrollment",
    "FormData",
    "InvalidTransition",
    "RegistrationClient",
    "RegistrationWizard",
    "SignupMethod",
    "SubmissionFailed",
    "WizardEvent",
    "WizardState",
]
