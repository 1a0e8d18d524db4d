"""
Security scheme consolidation.
"""

from __future__ import annotations

import copy
from typing import Dict, Mapping, Optional, Tuple

from ...document import OAuthFlow, OAuthFlows, SecurityScheme
from ..base import BaseComponentMerger, MergeWarningType

_FLOW_TYPES = ("implicit", "password", "client_credentials", "authorization_code")


class SecuritySchemeMerger(BaseComponentMerger):
    """
    First scheme registered under a name wins.

    A later source re-declaring the name is accepted silently when the two
    schemes are equivalent and reported as a conflict otherwise.
    """

    def __init__(self):
        super().__init__()
        self._schemes: Dict[str, Tuple[SecurityScheme, str]] = {}

    def add_schemes(
        self, schemes: Mapping[str, SecurityScheme], source_name: str
    ) -> None:
        for name, scheme in schemes.items():
            existing = self._schemes.get(name)
            if existing is None:
                self._schemes[name] = (copy.deepcopy(scheme), source_name)
                continue

            existing_scheme, existing_source = existing
            if not are_security_schemes_equivalent(existing_scheme, scheme):
                self._warn(
                    MergeWarningType.SECURITY_SCHEME_CONFLICT,
                    f"Security scheme '{name}' from source '{source_name}' "
                    f"conflicts with scheme from '{existing_source}'. "
                    f"Using first scheme.",
                    source_name,
                )

    def get_schemes(self) -> Dict[str, SecurityScheme]:
        return {name: scheme for name, (scheme, _) in self._schemes.items()}


def are_security_schemes_equivalent(a: SecurityScheme, b: SecurityScheme) -> bool:
    """
    Compare the fields that change how a client authenticates.

    Descriptions are ignored.
    """
    if a.type != b.type:
        return False
    if a.name != b.name or a.in_ != b.in_:
        return False
    if a.scheme != b.scheme or a.bearer_format != b.bearer_format:
        return False
    if a.open_id_connect_url != b.open_id_connect_url:
        return False
    if a.ref != b.ref:
        return False

    if a.flows is None or b.flows is None:
        return a.flows is None and b.flows is None
    return _flows_equivalent(a.flows, b.flows)


def _flows_equivalent(a: OAuthFlows, b: OAuthFlows) -> bool:
    return all(
        _flow_equivalent(getattr(a, flow_type), getattr(b, flow_type))
        for flow_type in _FLOW_TYPES
    )


def _flow_equivalent(a: Optional[OAuthFlow], b: Optional[OAuthFlow]) -> bool:
    if a is None or b is None:
        return a is None and b is None

    if a.authorization_url != b.authorization_url:
        return False
    if a.token_url != b.token_url:
        return False
    if a.refresh_url != b.refresh_url:
        return False

    if a.scopes is None or b.scopes is None:
        return a.scopes is None and b.scopes is None
    return dict(a.scopes) == dict(b.scopes)
