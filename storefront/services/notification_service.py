# storefront/services/notification_service.py
from decimal import Decimal

from storefront.celery_worker import celery_app
from storefront.domain.models import Cart
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Hands completed carts to downstream systems (fulfilment, payment) through
    Celery. Dispatch is best effort: the checkout has already been committed.
    """

    def send_checkout_notification(self, cart: Cart) -> None:
        try:
            send_checkout_notification_task.delay(cart.owner, cart.id, str(cart.total))
        except Exception as e:
            logger.warning(f"Failed to dispatch checkout notification for cart {cart.id}: {e}")


@celery_app.task(name="storefront.services.notification_service.send_checkout_notification_task")
def send_checkout_notification_task(owner: str, cart_id: str, total: str):
    """
    Celery task - downstream systems pick the completed cart up from here.
    For now it only logs.
    """
    logger.info(f"[CHECKOUT] User {owner}: cart {cart_id} completed, total {Decimal(total)}")

    return {"owner": owner, "cart_id": cart_id, "total": total, "status": "sent"}
