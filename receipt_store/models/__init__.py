from receipt_store.models.receipt import ReceiptModel

__all__ = ["ReceiptModel"]
