"""
api.invoices
============

Sales invoices.  Creating one issues the next ``Fact-NNNN`` number and
takes the sold birds out of the sales coop; deleting one does **not**
return them.  ``/{id}/whatsapp`` returns a receipt text and a
``wa.me`` link for sending it to the client.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from pollito.invoicing import whatsapp_message, whatsapp_url

from .deps import Store, get_store
from .schemas import InvoiceCreate, InvoiceOut, InvoiceUpdate, Message, WhatsAppShare

router = APIRouter(prefix="/api/invoices", tags=["invoices"])

logger = logging.getLogger(__name__)


@router.get("", response_model=List[InvoiceOut])
def list_invoices(store: Store = Depends(get_store)):
    return store.get_invoices()


@router.post("", response_model=InvoiceOut)
def create_invoice(body: InvoiceCreate, store: Store = Depends(get_store)):
    invoice = store.create_invoice(**body.model_dump())
    logger.info("invoice %s issued to %s: %s", invoice.invoice_number, invoice.client_name, invoice.total)
    return invoice


@router.put("/{invoice_id}", response_model=InvoiceOut)
def update_invoice(invoice_id: int, body: InvoiceUpdate, store: Store = Depends(get_store)):
    return store.update_invoice(invoice_id, **body.model_dump(exclude_unset=True))


@router.delete("/{invoice_id}", response_model=Message)
def delete_invoice(invoice_id: int, store: Store = Depends(get_store)):
    store.delete_invoice(invoice_id)
    logger.info("invoice %d deleted", invoice_id)
    return {"message": "Invoice deleted successfully"}


@router.get("/{invoice_id}/whatsapp", response_model=WhatsAppShare)
def share_invoice(invoice_id: int, store: Store = Depends(get_store)):
    """Receipt text and a ``wa.me`` link addressed to the client's phone."""
    invoice = store.get_invoice(invoice_id)
    message = whatsapp_message(invoice)
    return {"message": message, "url": whatsapp_url(invoice.client_phone, message)}
