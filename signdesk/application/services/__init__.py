"""Application services: signature coordination, seal resolution and questionnaire generation."""

from signdesk.application.services.organization_seal import OrganizationSealResolver
from signdesk.application.services.questionnaire_generation import (
    QuestionnaireGenerator,
    QuestionnaireType,
    TrainingOutline,
)
from signdesk.application.services.signature_coordinator import (
    SignatureButtonState,
    SignatureCoordinator,
    SignPermission,
)
from signdesk.application.services.signature_payload import (
    SignatureImage,
    decode_signature_payload,
)

__all__ = [
    "OrganizationSealResolver",
    "QuestionnaireGenerator",
    "QuestionnaireType",
    "SignatureButtonState",
    "SignatureCoordinator",
    "SignatureImage",
    "SignPermission",
    "TrainingOutline",
    "decode_signature_payload",
]
