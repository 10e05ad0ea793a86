from __future__ import annotations


__copyright__ = "Copyright (C) 2024 Exam Center contributors"

__license__ = """
Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
THE SOFTWARE.
"""

import logging
from typing import Any

from django.db.models.signals import post_save
from django.dispatch import receiver

from center.models import Registration
from center.signaling import exam_event, relay


logger = logging.getLogger(__name__)


# {{{ forward lifecycle events to the room relay

@receiver(exam_event)
def forward_exam_event_to_relay(
        sender: Any, room: str, event: str, payload: Any = None,
        **kwargs: Any) -> None:
    delivered = relay.emit(room, event, payload)
    logger.info("event '%s' for room '%s' reached %d subscriber(s)",
            event, room, delivered)

# }}}


# {{{ log device deactivation

@receiver(post_save, sender=Registration)
def log_registration_status(
        sender: Any, instance: Registration, created: bool,
        **kwargs: Any) -> None:
    if created:
        logger.info("PC '%s' (uuid %s) registered",
                instance.pc_name, instance.uuid)
    elif not instance.is_active:
        logger.info("PC '%s' (uuid %s) is not active",
                instance.pc_name, instance.uuid)

# }}}

# vim: foldmethod=marker
