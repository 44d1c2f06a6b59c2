from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import urlencode


class Capability(str, Enum):
    """Package-gated actions. Every one currently maps to "has any entitlement"."""

    VIEW_WORKOUT = "workout"
    VIEW_NUTRITION = "nutrition"
    VIEW_SUPPLEMENT = "supplement"
    VIEW_PROGRESS = "progress"
    SUBMIT_PT_FORM = "pt-form"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        text = (value or "").strip()
        for capability in cls:
            if text in (capability.value, capability.name, capability.name.lower()):
                return capability
        raise ValueError(f"Unknown capability: {value!r}")


@dataclass(frozen=True)
class Decision:
    allowed: bool
    capability: Capability
    entitlement: Optional[object] = None
    redirect_hint: Optional[str] = None

    def __bool__(self):
        return self.allowed

    def to_json(self):
        return {
            "allowed": self.allowed,
            "capability": self.capability.value,
            "redirect": self.redirect_hint,
        }


def upsell_redirect(capability, upsell_url="/packages"):
    separator = "&" if "?" in upsell_url else "?"
    return f"{upsell_url}{separator}{urlencode({'source': capability.value})}"


def allow(capability, entitlement):
    return Decision(allowed=True, capability=capability, entitlement=entitlement)


def deny(capability, upsell_url="/packages"):
    return Decision(
        allowed=False,
        capability=capability,
        redirect_hint=upsell_redirect(capability, upsell_url),
    )
