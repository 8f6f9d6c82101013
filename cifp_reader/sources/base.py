from abc import ABC, abstractmethod

from ..models.cifp_model import CifpModel


class SourceInterface(ABC):
    """
    Base interface for all data sources.

    A source knows where to get CIFP data and how to merge what it read into
    a ``CifpModel``.
    """

    @abstractmethod
    def update_model(self, model: CifpModel) -> None:
        """
        Update the CifpModel with data from this source.

        Args:
            model: The CifpModel to update; entities read by the source are
                merged into it
        """
        pass

    def get_source_name(self) -> str:
        """
        Get the name of this source.

        Returns:
            String identifier for this source
        """
        return self.__class__.__name__.lower()
