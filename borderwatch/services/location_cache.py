"""
Location session cache for BorderWatch.

Holds the latest reported position of each client session in memory. Only
the most recent sample per session is kept and nothing is persisted.
"""

from typing import Dict, List, Optional

from borderwatch.schemas.location import LocationSample


class LocationCache:
    """
    Last-write-wins map from session id to its latest LocationSample.

    Entries live until the process exits.
    """

    def __init__(self):
        self._samples: Dict[str, LocationSample] = {}

    def update(self, session_id: str, sample: LocationSample) -> None:
        self._samples[session_id] = sample

    def get(self, session_id: str) -> Optional[LocationSample]:
        return self._samples.get(session_id)

    def all(self) -> List[LocationSample]:
        return list(self._samples.values())

    def __len__(self) -> int:
        return len(self._samples)
