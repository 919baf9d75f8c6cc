from __future__ import annotations

from typing import Any, Dict, Optional


class CityStore:
    """Read-only view over the `cities` collection ({city, lat, lng})."""

    def __init__(self, db: Any) -> None:
        self.collection = db.cities

    def random_city(self) -> Optional[str]:
        docs = list(self.collection.aggregate([{"$sample": {"size": 1}}]))
        if not docs:
            return None
        return docs[0].get("city")

    def coordinates(self, name: str) -> Optional[Dict[str, float]]:
        doc = self.collection.find_one({"city": name}, {"lat": 1, "lng": 1})
        if not doc:
            return None
        return {"lat": float(doc["lat"]), "lng": float(doc["lng"])}
