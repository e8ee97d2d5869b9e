"""Core data models shared by the lead extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True, slots=True)
class ScanQuery:
    """Operator intent: what to look for and where."""

    category: str
    location: str
    boolean_logic: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"category": self.category, "location": self.location}
        if self.boolean_logic:
            payload["booleanLogic"] = self.boolean_logic
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScanQuery":
        return cls(
            category=str(data["category"]),
            location=str(data["location"]),
            boolean_logic=data.get("booleanLogic") or None,
        )


@dataclass(frozen=True, slots=True)
class GeoBias:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class RawExtractionResult:
    """Text returned by the generation engine plus its grounding citation count."""

    text: str
    source_count: int = 0


@dataclass(frozen=True, slots=True)
class SocialFootprint:
    linkedin: str = NOT_AVAILABLE
    twitter: str = NOT_AVAILABLE
    facebook: str = NOT_AVAILABLE

    def to_dict(self) -> Dict[str, str]:
        return {"linkedin": self.linkedin, "twitter": self.twitter, "facebook": self.facebook}


@dataclass(frozen=True, slots=True)
class Business:
    """One extracted lead. `name` is always a real value of two characters or more."""

    id: str
    name: str
    address: str = NOT_AVAILABLE
    phone: str = NOT_AVAILABLE
    email: str = NOT_AVAILABLE
    website: str = NOT_AVAILABLE
    leader_name: str = NOT_AVAILABLE
    leader_role: str = NOT_AVAILABLE
    description: str = NOT_AVAILABLE
    channel: str = NOT_AVAILABLE
    social_footprint: SocialFootprint = field(default_factory=SocialFootprint)
    latitude: float = 0.0
    longitude: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "email": self.email,
            "website": self.website,
            "leaderName": self.leader_name,
            "leaderRole": self.leader_role,
            "description": self.description,
            "channel": self.channel,
            "socialFootprint": self.social_footprint.to_dict(),
            "latitude": self.latitude,
            "longitude": self.longitude,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Business":
        social = data.get("socialFootprint") or {}
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            address=data.get("address", NOT_AVAILABLE),
            phone=data.get("phone", NOT_AVAILABLE),
            email=data.get("email", NOT_AVAILABLE),
            website=data.get("website", NOT_AVAILABLE),
            leader_name=data.get("leaderName", NOT_AVAILABLE),
            leader_role=data.get("leaderRole", NOT_AVAILABLE),
            description=data.get("description", NOT_AVAILABLE),
            channel=data.get("channel", NOT_AVAILABLE),
            social_footprint=SocialFootprint(
                linkedin=social.get("linkedin", NOT_AVAILABLE),
                twitter=social.get("twitter", NOT_AVAILABLE),
                facebook=social.get("facebook", NOT_AVAILABLE),
            ),
            latitude=float(data.get("latitude", 0.0)),
            longitude=float(data.get("longitude", 0.0)),
        )
