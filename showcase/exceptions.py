# showcase/exceptions.py

class CatalogException(Exception):
  """All product catalog (backend listing) errors"""
  pass

class CatalogTimeoutError(CatalogException):
  """Catalog request timed out"""
  pass

class CatalogConnectionError(CatalogException):
  """Backend could not be reached"""

class CatalogHTTPError(CatalogException):
  """Backend answered with HTTP status 400-499 or 500-599"""
  def __init__(self, status_code: int, message: str = None):
    self.status_code = status_code
    self.message = message or f"HTTP error {status_code}"
    super().__init__(self.message)

class CatalogParsingError(CatalogException):
  """Catalog payload is not a list of product records"""
  pass


class PreviewException(Exception):
  """All link-preview service errors"""
  pass

class PreviewTimeoutError(PreviewException):
  """Preview request timed out"""
  pass

class PreviewConnectionError(PreviewException):
  """Preview service could not be reached"""

class PreviewHTTPError(PreviewException):
  """Preview service answered with an error status"""
  def __init__(self, status_code: int, message: str = None):
    self.status_code = status_code
    self.message = message or f"HTTP error {status_code}"
    super().__init__(self.message)

class PreviewParsingError(PreviewException):
  """Preview response body is not the expected JSON object"""
  pass
