"""Base feature interface for repository features"""

from typing import Any


class RepositoryFeature:
    """
    Base class for repository features.

    Features hook into repository lifecycle events to add behaviour such as
    timestamps without touching each service.
    """

    # Columns the store must move strictly past their stored value on update
    advancing_columns: tuple[str, ...] = ()

    def before_create(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Hook called before inserting a record.

        Args:
            data: Column values about to be inserted

        Returns:
            Modified data dictionary
        """
        return data

    def before_update(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Hook called before a partial update.

        Args:
            data: Only the columns being changed

        Returns:
            Modified data dictionary
        """
        return data
