from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel

Visibility = Literal["private", "class"]

# campi pedagogici: gli unici copiati da una flashcard all'altra
FLASHCARD_CONTENT_FIELDS = (
    "term",
    "translation",
    "hint",
    "audio_url",
    "display_text",
    "eval_text",
    "note_text",
    "lang",
    "accepted_answers_en",
    "accepted_answers_pt",
)

FOLDER_CONTENT_FIELDS = (
    "description",
    "lang_a",
    "lang_b",
    "labels_a",
    "labels_b",
    "study_type",
    "tts_enabled",
)

LIST_CONTENT_FIELDS = FOLDER_CONTENT_FIELDS + ("lang", "order_index")


class Folder(BaseModel):
    id: str
    owner_id: str
    title: str
    description: Optional[str] = None
    visibility: Visibility = "private"
    class_id: Optional[str] = None
    lang_a: Optional[str] = None
    lang_b: Optional[str] = None
    labels_a: Optional[str] = None
    labels_b: Optional[str] = None
    study_type: str = "language"
    tts_enabled: bool = True
    created_at: Optional[datetime] = None


class StudyList(BaseModel):
    id: str
    folder_id: Optional[str] = None
    owner_id: str
    title: str
    description: Optional[str] = None
    lang: Optional[str] = None
    visibility: Visibility = "private"
    class_id: Optional[str] = None
    lang_a: Optional[str] = None
    lang_b: Optional[str] = None
    labels_a: Optional[str] = None
    labels_b: Optional[str] = None
    study_type: str = "language"
    tts_enabled: bool = True
    order_index: int = 0
    created_at: Optional[datetime] = None


class Flashcard(BaseModel):
    id: str
    list_id: str
    user_id: str
    term: str
    translation: str
    hint: Optional[str] = None
    audio_url: Optional[str] = None
    display_text: Optional[str] = None
    eval_text: Optional[str] = None
    note_text: Optional[List[str]] = None
    lang: Optional[str] = None
    accepted_answers_en: Optional[List[str]] = None
    accepted_answers_pt: Optional[List[str]] = None
    collection_id: Optional[str] = None
    created_at: Optional[datetime] = None
