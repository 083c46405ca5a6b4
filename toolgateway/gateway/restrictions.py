"""
Instance-scoped access restrictions.

A restriction is attached to an InstanceConfig (via its restriction() method) and is consulted
by the dispatcher after the instance is resolved and before any backend call is made. Listing
results pass back through filter_result once their shape has been checked.
"""
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Sequence


class Restriction(ABC):
    """Policy narrowing which targets a tool call may touch on one instance"""

    @abstractmethod
    def check(self, tool_name: str, arguments: Mapping[str, Any]) -> Optional[str]:
        """Return a denial reason, or None when the call is permitted"""
        pass

    def filter_result(self, tool_name: str, data: Any) -> Any:
        """Narrow a successful result to what the instance may see"""
        return data


class ProjectKeyRestriction(Restriction):
    """Allow-lists a single project key.

    Project arguments must equal the key; issue arguments (PROJ-123) must belong to it. Listing
    tools named in listing_fields are cut down to the entries whose key field is the allowed key.
    """

    def __init__(
        self,
        allowed_project_key: str,
        project_fields: Sequence[str] = ("projectKey",),
        issue_fields: Sequence[str] = ("issueKey",),
        listing_fields: Optional[Mapping[str, str]] = None,
    ):
        self.allowed_project_key = allowed_project_key
        self.project_fields = tuple(project_fields)
        self.issue_fields = tuple(issue_fields)
        self.listing_fields = dict(listing_fields if listing_fields is not None else {"list_projects": "key"})

    def check(self, tool_name: str, arguments: Mapping[str, Any]) -> Optional[str]:
        for field in self.project_fields:
            value = arguments.get(field)
            if value is not None and str(value) != self.allowed_project_key:
                return self._denied(field, value)

        for field in self.issue_fields:
            value = arguments.get(field)
            if value is None:
                continue
            project = str(value).split("-", 1)[0]
            if project != self.allowed_project_key:
                return self._denied(field, value)

        return None

    def filter_result(self, tool_name: str, data: Any) -> Any:
        field = self.listing_fields.get(tool_name)
        if field is None or not isinstance(data, list):
            return data
        return [
            item for item in data
            if isinstance(item, dict) and str(item.get(field)) == self.allowed_project_key
        ]

    def _denied(self, field: str, value: Any) -> str:
        return (
            f"restricted to project '{self.allowed_project_key}', "
            f"requested {field} '{value}'"
        )

    def __repr__(self) -> str:
        return f"ProjectKeyRestriction({self.allowed_project_key!r})"
