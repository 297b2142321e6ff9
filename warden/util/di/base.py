"""Provider base shared by every warden DI provider."""

from typing import ClassVar, Literal

from dishka import Provider

# Infrastructure that tests can swap for in-memory doubles
Component = Literal["persistence", "identity", "mail"]


class ProviderBase(Provider):
    """Base for warden providers.

    Attributes:
        __mock_component__: Component a mockable provider stands for
        __is_mock__: True for the in-memory double of that component
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False
