from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import List, Optional

FEATURES = [
    "24/7 Roadside Assistance",
    "Nation Wide Towing",
    "Flat Tire Assistance",
    "Fuel Delivery",
    "Battery Jump Start",
]


@dataclass(frozen=True)
class Plan:
    id: str
    name: str
    price: Decimal
    original_price: Decimal
    duration: str
    features: List[str] = field(default_factory=lambda: list(FEATURES))
    is_most_popular: bool = False

    def as_dict(self):
        data = asdict(self)
        return {
            "id": data["id"],
            "name": data["name"],
            "price": float(self.price),
            "originalPrice": float(self.original_price),
            "duration": data["duration"],
            "features": data["features"],
            "isMostPopular": data["is_most_popular"],
        }


PLANS = [
    Plan("Kalyan_001", "Standard Coverage", Decimal("1"), Decimal("3500"), "1 Year"),
    Plan("Kalyan_002", "Premium Coverage", Decimal("4499"), Decimal("6000"), "2 Year"),
    Plan("Kalyan_003", "Platinum Coverage", Decimal("6499"), Decimal("10000"), "3 Year", is_most_popular=True),
]

_BY_ID = {plan.id: plan for plan in PLANS}


def get_plan(plan_id) -> Optional[Plan]:
    if not plan_id:
        return None
    return _BY_ID.get(str(plan_id).strip())
