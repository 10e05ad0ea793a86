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

from typing import Any

from center.constants import exam_type
from center.models import (
    ListeningPaper,
    PaperBase,
    ReadingPaper,
    SpeakingPaper,
    WritingPaper,
)
from center.utils import APIError, NotFound


PAPER_MODELS: dict[str, type[PaperBase]] = {
        exam_type.writing: WritingPaper,
        exam_type.speaking: SpeakingPaper,
        exam_type.listening: ListeningPaper,
        exam_type.reading: ReadingPaper,
        }


def get_paper_model(kind: str) -> type[PaperBase]:
    try:
        return PAPER_MODELS[kind.lower()]
    except KeyError:
        raise APIError("Invalid exam type: '%s'" % kind)


def get_paper(kind: str, paper_id: Any) -> PaperBase:
    model = get_paper_model(kind)
    try:
        return model.objects.get(pk=paper_id)
    except (model.DoesNotExist, ValueError, TypeError):
        raise NotFound("Exam paper not found for %s" % kind)


def paper_summary_to_json(paper: PaperBase) -> dict[str, Any]:
    return {
            "id": paper.pk,
            "title": paper.title,
            "description": paper.description,
            }


def paper_to_json(paper: PaperBase) -> dict[str, Any]:
    return {
            "id": paper.pk,
            "title": paper.title,
            "description": paper.description,
            "status": paper.status,
            "created_by": paper.created_by,
            "estimated_minutes": paper.estimated_minutes,
            "content": paper.content,
            "created_at": paper.created_at.isoformat(),
            }
