from .link import LinkCreate, LinkResponse, LinkPreview, DeleteResponse

__all__ = ["LinkCreate", "LinkResponse", "LinkPreview", "DeleteResponse"]
