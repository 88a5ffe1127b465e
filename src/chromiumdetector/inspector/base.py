class InspectionError(Exception):
    """Raised when a binary's linked libraries cannot be listed."""


class BaseLister:
    def list_dependencies(self, executable: str) -> str:
        raise NotImplementedError
