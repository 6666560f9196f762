"""Visual outfit descriptor consumed by the avatar renderer."""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass
class OutfitDescriptor:
    clothing: Optional[str] = None
    clothing_color: Optional[str] = None
    accessories: str = "none"
    top: Optional[str] = None
    hat_color: Optional[str] = None

    @property
    def headwear(self) -> Optional[str]:
        return self.top

    def to_dict(self) -> Dict[str, str]:
        """Renderer wire format; headwear keys are omitted when unset."""

        payload = {
            "clothing": self.clothing,
            "clothingColor": self.clothing_color,
            "accessories": self.accessories,
        }
        if self.top is not None:
            payload["top"] = self.top
            payload["hatColor"] = self.hat_color
        return payload
