"""FastAPI server that exposes parsing and live hosting endpoints."""

from __future__ import annotations

from datetime import datetime
from threading import Thread

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
import uvicorn

from livequiz.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION, HELP_TEXT
from livequiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from livequiz.constants.quiz_constants import DEFAULT_AUTHOR_NAME
from livequiz.core.document_parser import parse_quiz_document
from livequiz.core.quiz_exporter import serialize_questions
from livequiz.core.quiz_manager import QuizManager


class _CamelModel(BaseModel):
    """Response models are read straight off the core dataclasses and emitted in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class OptionOut(_CamelModel):
    oid: str
    text: str


class MediaOut(_CamelModel):
    type: str
    url: str
    caption: str | None = None


class QuestionOut(_CamelModel):
    qid: str
    raw_text: str
    stem: str
    media: list[MediaOut]
    options: list[OptionOut]
    correct: list[str]
    points_if_correct: float
    points_if_wrong: float
    timer_seconds: int
    open_at: datetime | None = None
    close_at: datetime | None = None
    explanation: str | None = None


class LiveQuestionOut(_CamelModel):
    """Question as shown to students while it is open: no answer key, no explanation."""

    qid: str
    stem: str
    options: list[OptionOut]
    timer_seconds: int


class SettingsOut(_CamelModel):
    mode: str
    creator_only_login: bool
    join_requires_login: bool
    guest_name_unique: bool
    default_timer_seconds: int
    display_all_questions_at_once: bool
    negative_marking_default: float
    shuffle_questions: bool
    shuffle_options: bool
    max_participants: int


class JoinOut(_CamelModel):
    join_url_pattern: str
    qr_payload: str
    token_length: int
    token: str


class LeaderboardOut(_CamelModel):
    enabled: bool
    display_names_anonymized: bool
    top_n: int


class MetadataOut(_CamelModel):
    created_by: str
    created_at: datetime
    language: str
    notes: str


class ParticipantOut(_CamelModel):
    participant_id: str
    display_name: str
    score: float
    correct_count: int
    joined_at: datetime


class QuizOut(_CamelModel):
    quiz_id: str
    title: str
    description: str
    settings: SettingsOut
    join: JoinOut
    questions: list[QuestionOut]
    participants: list[ParticipantOut]
    leaderboard: LeaderboardOut
    metadata: MetadataOut
    errors: list[str]
    answer_key_missing: bool
    status: str
    current_question_index: int


class ParseOut(_CamelModel):
    quiz: QuizOut
    errors: list[str]
    warnings: list[str]
    answer_key_missing: bool


class AnswerOut(_CamelModel):
    qid: str
    display_name: str
    selected: list[str]
    is_correct: bool
    points_earned: float
    submitted_at: datetime


class ScoreboardRowOut(_CamelModel):
    position: int
    display_name: str
    score: float
    correct_count: int


class DocumentPayload(BaseModel):
    """Payload schema for a pasted quiz document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    document: str
    author_name: str = DEFAULT_AUTHOR_NAME


class JoinPayload(BaseModel):
    """Payload schema for the lobby join flow."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    display_name: str


class AnswerPayload(BaseModel):
    """Payload schema for submitted answers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    display_name: str
    selected: list[str] = Field(default_factory=list)


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def create_api_app(quiz_manager: QuizManager | None = None) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", description=APP_ABOUT_TEXT, version=APP_VERSION)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager or QuizManager())

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/help", response_class=PlainTextResponse)
    def document_help() -> str:
        return HELP_TEXT

    @app.post("/parse", response_model=ParseOut)
    def parse_document(payload: DocumentPayload, request: Request) -> ParseOut:
        result = parse_quiz_document(
            payload.document,
            payload.author_name,
            base_url=str(request.base_url),
        )
        return ParseOut.model_validate(result)

    @app.post("/export", response_class=PlainTextResponse)
    def export_document(payload: DocumentPayload) -> str:
        result = parse_quiz_document(payload.document, payload.author_name)
        if not result.quiz.questions:
            raise HTTPException(status_code=422, detail="; ".join(result.errors))
        return serialize_questions(result.quiz.questions, result.quiz.title, result.quiz.description)

    @app.post("/quiz", response_model=QuizOut, status_code=201)
    def load_quiz(
        payload: DocumentPayload,
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> QuizOut:
        result = parse_quiz_document(
            payload.document,
            payload.author_name,
            base_url=str(request.base_url),
        )
        try:
            draft = manager.load_parse_result(result)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return QuizOut.model_validate(draft)

    @app.post("/lobby")
    def open_lobby(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            manager.open_lobby()
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {"lobby_open": True}

    @app.get("/lobby", response_model=list[ParticipantOut])
    def lobby_participants(manager: QuizManager = Depends(quiz_manager_dep)) -> list[ParticipantOut]:
        return [ParticipantOut.model_validate(entry) for entry in manager.get_lobby_participants()]

    @app.post("/join", response_model=ParticipantOut, status_code=201)
    def join_lobby(
        payload: JoinPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> ParticipantOut:
        try:
            joined = manager.join_lobby(payload.display_name)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return ParticipantOut.model_validate(joined)

    @app.post("/start")
    def start_quiz(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            manager.start_quiz()
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {"status": manager.get_status()}

    @app.post("/next")
    def next_question(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            question = manager.move_to_next_question()
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        live_question = None
        if question is not None:
            live_question = LiveQuestionOut.model_validate(question).model_dump(by_alias=True)
        return {"status": manager.get_status(), "question": live_question}

    @app.get("/question")
    def current_question(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        question = manager.get_current_question()
        live_question = None
        if question is not None:
            live_question = LiveQuestionOut.model_validate(question).model_dump(by_alias=True)
        return {
            "status": manager.get_status(),
            "question": live_question,
            "optionCounts": manager.get_option_counts(),
        }

    @app.post("/stop")
    def stop_question(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        manager.stop_current_question()
        return {"status": manager.get_status()}

    @app.post("/end")
    def end_quiz(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            manager.end_quiz()
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {"status": manager.get_status()}

    @app.post("/answer", response_model=AnswerOut, status_code=201)
    def submit_answer(
        payload: AnswerPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> AnswerOut:
        try:
            answer = manager.submit_answer(payload.display_name, payload.selected)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return AnswerOut.model_validate(answer)

    @app.get("/leaderboard", response_model=list[ScoreboardRowOut])
    def leaderboard(manager: QuizManager = Depends(quiz_manager_dep)) -> list[ScoreboardRowOut]:
        return [ScoreboardRowOut.model_validate(row) for row in manager.get_top_scorers()]

    @app.get("/results.csv", response_class=PlainTextResponse)
    def results_csv(manager: QuizManager = Depends(quiz_manager_dep)) -> PlainTextResponse:
        return PlainTextResponse(manager.export_results_csv(), media_type="text/csv")

    return app


def start_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="LiveQuizApiServer", daemon=True)
    thread.start()
    return thread
