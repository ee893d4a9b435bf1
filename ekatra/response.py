"""
Uniform response envelope.
Every public entry point answers with {status, data, metadata, message}.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ekatra import __version__

SUCCESS = "success"
ERROR = "error"


@dataclass(frozen=True)
class ResponseEnvelope:
    status: str
    data: Optional[Dict[str, Any]]
    metadata: Dict[str, Any] = field(default_factory=dict)
    message: str = ""

    @property
    def is_success(self) -> bool:
        return self.status == SUCCESS

    @property
    def errors(self):
        """Validation errors carried in the metadata, if any."""
        validation = self.metadata.get("validation") or {}
        return list(validation.get("errors", []))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "data": self.data,
            "metadata": dict(self.metadata),
            "message": self.message
        }


def build_envelope(status: str, data: Optional[Dict[str, Any]] = None,
                   extras: Optional[Dict[str, Any]] = None, message: str = "") -> ResponseEnvelope:
    """Merge the base metadata with caller extras and wrap the payload."""
    metadata = {"sdkVersion": __version__}
    metadata.update(extras or {})
    return ResponseEnvelope(status=status, data=data, metadata=metadata, message=message)


def success(data: Dict[str, Any], extras: Optional[Dict[str, Any]] = None,
            message: str = "Product details retrieved successfully") -> ResponseEnvelope:
    return build_envelope(SUCCESS, data, extras, message)


def error(message: str, extras: Optional[Dict[str, Any]] = None) -> ResponseEnvelope:
    return build_envelope(ERROR, None, extras, message)


def validation_error(validation: Dict[str, Any], message: str = "Product validation failed",
                     extras: Optional[Dict[str, Any]] = None) -> ResponseEnvelope:
    metadata = dict(extras or {})
    metadata.update({
        "validation": validation,
        "canAutoTransform": False,
        "manualSetupRequired": True,
        "maxQuantity": None
    })
    return error(message, metadata)


def transformation_error(message: str, extras: Optional[Dict[str, Any]] = None) -> ResponseEnvelope:
    metadata = {
        "validation": None,
        "canAutoTransform": False,
        "manualSetupRequired": True,
        "maxQuantity": None
    }
    metadata.update(extras or {})
    return error(message, metadata)
