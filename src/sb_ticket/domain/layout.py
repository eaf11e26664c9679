"""Fixed-width binary layout of a Ticket record (75-byte body)."""

import struct

from src.sb_account.domain.addressing import identity_bytes
from src.sb_account.domain.layout import DISCRIMINATOR_LEN, discriminator
from src.sb_ticket.domain.models import Ticket

_ACCOUNT_NAME = "BetTicket"

# user, market, side, amount, claimed, bump
_TICKET = struct.Struct("<32s32sBQ?B")
TICKET_SIZE = _TICKET.size  # 75
TICKET_SPACE = DISCRIMINATOR_LEN + TICKET_SIZE


def encode_ticket(ticket: Ticket) -> bytes:
    body = _TICKET.pack(
        identity_bytes(ticket.user),
        identity_bytes(ticket.market),
        int(ticket.side),
        ticket.amount,
        ticket.claimed,
        ticket.bump,
    )
    return discriminator(_ACCOUNT_NAME) + body
