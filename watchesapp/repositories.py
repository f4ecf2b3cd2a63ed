from django.db.models import F

from .models import Watch


class WatchRepository:
    """Store access for watches, including the atomic quantity updates."""

    model = Watch

    def get(self, watch_id):
        try:
            return self.model.objects.select_related('brand').get(pk=watch_id)
        except (self.model.DoesNotExist, ValueError, TypeError):
            return None

    def exists(self, watch_id):
        return self.filter_by_id(watch_id).exists()

    def filter_by_id(self, watch_id):
        try:
            return self.model.objects.filter(pk=watch_id)
        except (ValueError, TypeError):
            return self.model.objects.none()

    def decrement_if_available(self, watch_id):
        """Take one unit in a single conditional UPDATE. Returns rows changed."""
        return self.filter_by_id(watch_id).filter(quantity__gte=1).update(
            quantity=F('quantity') - 1
        )

    def increment(self, watch_id):
        return self.filter_by_id(watch_id).update(quantity=F('quantity') + 1)
