"""Results document data model."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional


IMAGE_DETAILS_KEY = "imageDetails"
REGION_KEY = "region"


@dataclass
class ImageDetailsDocument:
    """The JSON document handed to the downstream pipeline step."""
    image_details: List[Dict[str, Any]]
    region: Optional[str] = None  # None when an existing file has no region
    extra: Dict[str, Any] = field(default_factory=dict)  # unknown top-level keys, kept as-is

    def append(self, images: List[Dict[str, Any]]):
        """Append images to the end of imageDetails, in order."""
        self.image_details.extend(images)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = dict(self.extra)
        data[IMAGE_DETAILS_KEY] = self.image_details
        if self.region is not None:
            data[REGION_KEY] = self.region
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ImageDetailsDocument':
        """Create from dictionary loaded from JSON."""
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

        image_details = data.get(IMAGE_DETAILS_KEY)
        if image_details is None:
            image_details = []
        if not isinstance(image_details, list):
            raise ValueError(f"'{IMAGE_DETAILS_KEY}' must be a list, got {type(image_details).__name__}")

        extra = {k: v for k, v in data.items() if k != IMAGE_DETAILS_KEY}
        region = extra.pop(REGION_KEY, None)
        if region is None and REGION_KEY in data:
            extra[REGION_KEY] = None
        return cls(
            image_details=list(image_details),
            region=region,
            extra=extra
        )


def json_default(value: Any) -> Any:
    """json.dumps hook for the datetime fields boto3 returns."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
