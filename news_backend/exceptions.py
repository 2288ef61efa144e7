class NewsBackendError(Exception):
    pass


class NewsSourceError(NewsBackendError):
    """The external news API could not be reached or returned an unusable response."""


class ArticleStoreError(NewsBackendError):
    pass


class MailDeliveryError(NewsBackendError):
    pass


class InvalidTokenError(NewsBackendError):
    pass
