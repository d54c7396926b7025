"""Visual roles: named slots (series, category, value, ...) bound to dimensions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from panelchart.core.constants import MULTI_DIMENSION_ROLES, SINGLE_DIMENSION_ROLES
from panelchart.core.options import snake_case
from panelchart.data.schema import ComplexType, GroupingSpec


@dataclass(frozen=True)
class VisualRole:
    name: str
    grouping: GroupingSpec


def detect_role_mappings(
    complex_type: ComplexType,
    explicit: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Role name -> grouping spec, filling unmapped roles from dimension naming:
    multi-dimension roles take every dimension of the group with the role's
    name, single-dimension roles take the dimension named like the role.
    Roles that match nothing stay unmapped. Explicit role names may be
    camelCase, like top-level option keys.
    """
    roles = {snake_case(name): spec for name, spec in (explicit or {}).items() if spec}

    for role_name in MULTI_DIMENSION_ROLES:
        if role_name not in roles:
            dims = complex_type.group_dimension_names(role_name, assert_exists=False)
            if dims:
                roles[role_name] = dims

    for role_name in SINGLE_DIMENSION_ROLES:
        if role_name not in roles and complex_type.dimension(role_name, assert_exists=False):
            roles[role_name] = role_name

    return roles


def init_roles(
    complex_type: ComplexType,
    explicit: Mapping[str, Any] | None = None,
) -> dict[str, VisualRole]:
    mappings = detect_role_mappings(complex_type, explicit)
    return {
        name: VisualRole(name, GroupingSpec.parse(spec, complex_type))
        for name, spec in mappings.items()
    }
