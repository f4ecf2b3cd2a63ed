from .models import Rental


class RentalRepository:

    model = Rental

    def queryset(self):
        # watch is fetched separately because the reference may dangle
        return self.model.objects.select_related('user').prefetch_related('watch__brand')

    def get(self, rental_id):
        try:
            return self.queryset().get(pk=rental_id)
        except (self.model.DoesNotExist, ValueError, TypeError):
            return None

    def create(self, **fields):
        rental = self.model(**fields)
        rental.full_clean()
        rental.save()
        return rental

    def all(self):
        return self.queryset().order_by('-created_at', '-id')

    def for_user(self, user_id):
        return self.all().filter(user_id=user_id)

    def ids_for_user(self, user_id):
        return self.model.objects.filter(user_id=user_id).values_list('pk', flat=True)

    def save(self, rental, fields):
        rental.save(update_fields=list(fields) + ['updated_at'])
        return rental

    def delete(self, rental):
        rental.delete()
