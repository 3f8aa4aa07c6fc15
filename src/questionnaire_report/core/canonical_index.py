# ============================================================================
# src/questionnaire_report/core/canonical_index.py
# ============================================================================
"""
Canonical Resource Index

Maps canonical URLs to definitional resources (Questionnaire, ValueSet,
CodeSystem, ...). Every resource with a ``url`` is registered twice:
under the full URL (which may carry a ``|version`` suffix) and under the
version-stripped URL, so references resolve in either form.

The index is built once per run through CanonicalIndexBuilder and is a
read-only Mapping afterwards. It is passed explicitly to the expansion
engine and the normalizer.
"""

from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, Optional
import logging

from ..config.fhir_config import DuplicateUrlPolicy, fhir_settings
from ..utils.exceptions import DuplicateCanonicalUrlError
from .resources import Resource, canonical_url, iter_resources, strip_version

logger = logging.getLogger(__name__)


class CanonicalIndex(Mapping):
    """
    Read-only mapping from canonical URL to resource.

    Example:
        index = CanonicalIndex.from_resources(bundles)
        vs = index.resolve("http://example.org/ValueSet/yes-no|1.0")
    """

    def __init__(self, entries: Optional[Dict[str, Resource]] = None):
        self._entries: Dict[str, Resource] = dict(entries or {})

    @classmethod
    def from_resources(
        cls,
        resources: Iterable[Resource],
        policy: Optional[DuplicateUrlPolicy] = None,
    ) -> "CanonicalIndex":
        """
        Index a sequence of resources or bundles.

        Args:
            resources: Parsed resources; bundles are flattened
            policy: Collision policy (defaults to configuration)

        Returns:
            CanonicalIndex
        """
        builder = CanonicalIndexBuilder(policy)
        for payload in resources:
            builder.add(payload)
        return builder.build()

    def __getitem__(self, key: str) -> Resource:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CanonicalIndex({len(self._entries)} urls)"

    def resolve(self, reference: Optional[str]) -> Optional[Resource]:
        """
        Look up a canonical reference, exact form first, then without version.

        Args:
            reference: Canonical URL, optionally ``|version`` suffixed

        Returns:
            The resource, or None when the reference is unknown
        """
        if not reference:
            return None
        resource = self._entries.get(reference)
        if resource is None:
            resource = self._entries.get(strip_version(reference))
        return resource


class CanonicalIndexBuilder:
    """Accumulates registrations, then freezes them into a CanonicalIndex."""

    def __init__(self, policy: Optional[DuplicateUrlPolicy] = None):
        self.policy = policy or fhir_settings.DUPLICATE_URL_POLICY
        self._entries: Dict[str, Resource] = {}

    def add(self, payload: Resource) -> int:
        """
        Register every resource carried by a payload (bundle or single resource).

        Returns:
            Number of resources that had a url and were registered
        """
        registered = 0
        for resource in iter_resources(payload):
            if self.register(resource):
                registered += 1
        return registered

    def register(self, resource: Resource) -> bool:
        """
        Register one resource under its full and version-stripped URL.

        Resources without a url are skipped.

        Raises:
            DuplicateCanonicalUrlError: policy is ERROR and a different
                resource already owns one of the keys
        """
        url = canonical_url(resource)
        if url is None:
            return False

        # dict.fromkeys keeps order and collapses url == stripped url
        for key in dict.fromkeys((url, strip_version(url))):
            existing = self._entries.get(key)
            if existing is not None and existing is not resource and existing != resource:
                if self.policy is DuplicateUrlPolicy.ERROR:
                    raise DuplicateCanonicalUrlError(key)
                if self.policy is DuplicateUrlPolicy.FIRST_WRITE_WINS:
                    logger.debug(f"Keeping first registration for {key}")
                    continue
                logger.debug(f"Overwriting registration for {key}")
            self._entries[key] = resource
        return True

    def build(self) -> CanonicalIndex:
        return CanonicalIndex(self._entries)


def index_resources(
    resources: Iterable[Resource],
    policy: Optional[DuplicateUrlPolicy] = None,
) -> CanonicalIndex:
    """Build a CanonicalIndex from resources and bundles."""
    return CanonicalIndex.from_resources(resources, policy)
