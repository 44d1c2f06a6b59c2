from abc import ABC, abstractmethod


class DashboardDataSource(ABC):
    """
    The data a role is allowed to aggregate over. One implementation per role,
    chosen once at the request boundary.
    """

    role = None

    @abstractmethod
    def load(self, now):
        """Return a DashboardInput read with a small constant number of batch queries."""
