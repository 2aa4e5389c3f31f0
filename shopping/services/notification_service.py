# shopping/services/notification_service.py
from shopping.celery_worker import celery_app
from shopping.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysylania powiadomien.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_placed(user_id: int, order_id: int, total_amount: str):
        """
        Wysyla powiadomienie o zlozeniu zamowienia.
        Wolane dopiero po commit - zamowienie juz istnieje.
        """
        return send_order_placed_notification.delay(user_id, order_id, total_amount)


@celery_app.task(name="shopping.services.notification_service.send_order_placed_notification")
def send_order_placed_notification(user_id: int, order_id: int, total_amount: str):
    """
    Celery task - w prawdziwym systemie wyslalby email/SMS/push.
    Teraz tylko loguje.
    """
    logger.info(
        "Order placed notification",
        user_id=user_id,
        order_id=order_id,
        total_amount=total_amount,
    )
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
