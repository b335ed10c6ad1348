import re

_PERMISSION_NAME_RE = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)+$")


class PermissionName(str):
    """A validated ``resource.action`` permission name.

    Validation happens once, where the requirement is declared. Decisions
    compare the plain string value exactly; there is no wildcard or prefix
    matching.

    >>> PermissionName("cms.pages.create").resource
    'cms.pages'
    """

    def __new__(cls, value: str) -> "PermissionName":
        if isinstance(value, PermissionName):
            return value
        if not isinstance(value, str) or not _PERMISSION_NAME_RE.match(value):
            raise ValueError(
                f"Invalid permission name {value!r}; expected 'resource.action'"
            )
        return super().__new__(cls, value)

    @property
    def resource(self) -> str:
        return self.rsplit(".", 1)[0]

    @property
    def action(self) -> str:
        return self.rsplit(".", 1)[1]

    def __repr__(self) -> str:
        return f"PermissionName({str(self)!r})"
