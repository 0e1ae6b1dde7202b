"""AI homework-assistant service layer.

Handles:
- Conversation lookup/creation per (assignment, user) pair
- Message storage (user + assistant), append-only
- Prompt assembly from assignment details and attached files
- Provider call with a stored fallback reply when it fails
"""
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from studyhub.config import Settings
from studyhub.core.errors import BadRequestError, NotFoundError, ProviderError
from studyhub.models._common import utcnow
from studyhub.models.assignment import Assignment
from studyhub.models.conversation import ROLE_ASSISTANT, ROLE_USER, Conversation, Message
from studyhub.services import assignment_service
from studyhub.services.completion import CompletionProvider
from studyhub.services.uploads import AttachedFile, build_file_context

logger = logging.getLogger(__name__)

GREETING_TEMPLATE = (
    'Hello! I\'m your AI assistant for the assignment "{title}". '
    "How can I help you understand or approach this assignment?"
)

FALLBACK_RESPONSE = (
    "I'm sorry, I encountered an issue processing your request. "
    "This might be due to a temporary problem with the AI service. "
    "Please try again in a moment."
)

OPENING_USER_TURN = "Tell me about this assignment"

GUIDANCE_INSTRUCTION = (
    "Please provide a helpful, educational response that helps the student "
    "understand or approach the assignment. Don't do the work for them, but "
    "guide them in the right direction."
)

SYSTEM_PROMPT = (
    "You are a study assistant helping a student with one of their assignments. "
    "Explain concepts and suggest approaches; never hand in finished work for them."
)

# Minimum spacing between consecutive message timestamps
_TIMESTAMP_STEP = timedelta(microseconds=1)


def format_due_date(due_date: datetime) -> str:
    """Human-readable due date, e.g. ``1/10/2025``."""
    return f"{due_date.month}/{due_date.day}/{due_date.year}"


class AssistantService:
    """Service layer for AI assistant conversations."""

    def __init__(self, settings: Settings, provider: Optional[CompletionProvider] = None):
        """Initialize assistant service; provider defaults to OpenAI."""
        self.settings = settings
        self.provider = provider or CompletionProvider(settings)

    def resolve_assignment(self, session: Session, assignment_id: str, user_id: str) -> Assignment:
        """
        Fetch the assignment a conversation is about.

        Ownership is only enforced when ENFORCE_ASSIGNMENT_OWNERSHIP is set;
        otherwise a mismatch is logged and the request proceeds.

        Raises:
            NotFoundError: If the assignment does not exist (or is not
                owned by the user, in enforcing mode)
        """
        assignment = assignment_service.get_assignment_by_id(session, assignment_id)
        if not assignment:
            raise NotFoundError("Assignment not found")

        if assignment.user_id != user_id:
            if self.settings.ENFORCE_ASSIGNMENT_OWNERSHIP:
                raise NotFoundError("Assignment not found")
            logger.warning(
                f"Assignment ownership mismatch: assignment={assignment_id}, "
                f"owner={assignment.user_id}, user={user_id}"
            )

        return assignment

    def find_conversation(
        self,
        session: Session,
        assignment_id: str,
        user_id: str,
    ) -> Optional[Conversation]:
        """Get the conversation for (assignment, user), if any."""
        statement = select(Conversation).where(
            Conversation.assignment_id == assignment_id,
            Conversation.user_id == user_id,
        )
        return session.exec(statement).first()

    def get_or_create_conversation(
        self,
        session: Session,
        assignment: Assignment,
        user_id: str,
    ) -> Conversation:
        """
        Get existing conversation or create a greeted one.

        Creation is insert-if-absent: when a concurrent request wins the
        unique (assignment_id, user_id) constraint, its row is used.

        Args:
            session: Database session
            assignment: Assignment the conversation is about
            user_id: Authenticated user ID

        Returns:
            Conversation instance
        """
        conversation = self.find_conversation(session, assignment.id, user_id)
        if conversation:
            return conversation

        conversation = Conversation(assignment_id=assignment.id, user_id=user_id)
        session.add(conversation)
        try:
            session.flush()
        except IntegrityError:
            session.rollback()
            logger.info(
                f"Conversation created concurrently: assignment={assignment.id}, user={user_id}"
            )
            conversation = self.find_conversation(session, assignment.id, user_id)
            if conversation is None:
                raise
            return conversation

        # Seed greeting in the same transaction as the conversation row
        session.add(
            Message(
                conversation_id=conversation.id,
                role=ROLE_ASSISTANT,
                text=GREETING_TEMPLATE.format(title=assignment.title),
            )
        )
        session.commit()
        session.refresh(conversation)

        logger.info(f"Conversation created: id={conversation.id}, assignment={assignment.id}")
        return conversation

    def get_messages(self, session: Session, conversation_id: int) -> List[Message]:
        """All messages of a conversation in chronological order."""
        statement = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.timestamp, Message.id)
        )
        return list(session.exec(statement).all())

    def store_message(
        self,
        session: Session,
        conversation_id: int,
        role: str,
        text: str,
    ) -> Message:
        """
        Append a message to a conversation.

        The timestamp is kept strictly after the conversation's latest one,
        so ordering by timestamp matches insertion order.

        Args:
            session: Database session
            conversation_id: Conversation ID
            role: "user" or "assistant"
            text: Message content

        Returns:
            Stored Message instance
        """
        latest = session.exec(
            select(Message.timestamp)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.timestamp.desc())
        ).first()

        timestamp = utcnow()
        if latest is not None and timestamp <= latest:
            timestamp = latest + _TIMESTAMP_STEP

        message = Message(
            conversation_id=conversation_id,
            role=role,
            text=text,
            timestamp=timestamp,
        )
        session.add(message)
        session.commit()
        session.refresh(message)
        return message

    def generate_response(
        self,
        session: Session,
        assignment_id: str,
        user_id: str,
        query: str,
        attached_files: Sequence[AttachedFile] = (),
    ) -> Tuple[str, datetime]:
        """
        Answer a student's question about an assignment.

        Flow:
        1. Validate input and resolve the assignment
        2. Fold attached files into a text context
        3. Get or create the conversation (seeded with a greeting)
        4. Store the user message
        5. Build transcript and prompt, call the provider
        6. Store the reply, or the fallback text if the provider failed

        Every call that gets past step 1 stores exactly one user message
        and one assistant message.

        Args:
            session: Database session
            assignment_id: Assignment the question is about
            user_id: Authenticated user ID
            query: The student's question
            attached_files: Documents uploaded with the question

        Returns:
            Tuple of (response_text, timestamp) of the stored assistant message

        Raises:
            BadRequestError: If assignment_id or query is empty
            NotFoundError: If the assignment does not exist
        """
        if not assignment_id or not assignment_id.strip() or not query or not query.strip():
            raise BadRequestError(
                "Assignment ID and query are required",
                errors=[
                    {"field": name, "message": f"{label} is required"}
                    for name, label, value in (
                        ("assignmentId", "Assignment ID", assignment_id),
                        ("query", "Query", query),
                    )
                    if not value or not value.strip()
                ],
            )

        assignment = self.resolve_assignment(session, assignment_id, user_id)

        file_context = build_file_context(attached_files)

        conversation = self.get_or_create_conversation(session, assignment, user_id)

        # History before this turn feeds the transcript
        history = self.get_messages(session, conversation.id)

        user_msg = self.store_message(session, conversation.id, ROLE_USER, query)

        transcript = self._build_transcript(history)
        prompt = self._build_prompt(assignment, query, file_context)

        try:
            response_text = self.provider.complete(
                [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    *transcript,
                    {"role": self.provider.user_role, "content": prompt},
                ],
                max_tokens=self.settings.AI_MAX_TOKENS,
                temperature=self.settings.AI_TEMPERATURE,
            )
        except ProviderError as e:
            logger.error(
                f"Provider failed for user {user_id}, conversation {conversation.id}: {e.message}"
            )
            response_text = FALLBACK_RESPONSE
        except Exception:
            # The user message is already stored; it must still get a reply
            logger.exception(
                f"Unexpected provider error for user {user_id}, conversation {conversation.id}"
            )
            response_text = FALLBACK_RESPONSE

        assistant_msg = self.store_message(session, conversation.id, ROLE_ASSISTANT, response_text)

        logger.info(
            f"Assistant exchange processed: user={user_id}, conversation={conversation.id}, "
            f"message_id={user_msg.id}, response_id={assistant_msg.id}"
        )

        return assistant_msg.text, assistant_msg.timestamp

    def get_conversation_history(
        self,
        session: Session,
        assignment_id: str,
        user_id: str,
    ) -> List[Message]:
        """
        Get the conversation for (assignment, user).

        Returns:
            Messages in chronological order; empty if none exist yet

        Raises:
            NotFoundError: If the assignment does not exist
        """
        self.resolve_assignment(session, assignment_id, user_id)

        conversation = self.find_conversation(session, assignment_id, user_id)
        if not conversation:
            return []

        return self.get_messages(session, conversation.id)

    def _build_transcript(self, history: Sequence[Message]) -> List[Dict[str, str]]:
        """
        Convert stored messages to provider format.

        The transcript must open with a user turn, so a leading assistant
        greeting gets a synthetic question in front of it.
        """
        transcript = [
            {
                "role": self.provider.assistant_role if msg.role == ROLE_ASSISTANT else self.provider.user_role,
                "content": msg.text,
            }
            for msg in history
        ]

        if transcript and transcript[0]["role"] == self.provider.assistant_role:
            transcript.insert(0, {"role": self.provider.user_role, "content": OPENING_USER_TURN})

        return transcript

    def _build_prompt(self, assignment: Assignment, query: str, file_context: str) -> str:
        """Compose the prompt with assignment context and the question."""
        lines = [
            f"Assignment Title: {assignment.title}",
            f"Due Date: {format_due_date(assignment.due_date)}",
        ]
        if assignment.description:
            lines.append(f"Description: {assignment.description}")
        if assignment.subject:
            lines.append(f"Subject: {assignment.subject}")
        if assignment.priority:
            lines.append(f"Priority: {assignment.priority}")
        if file_context:
            lines.append(f"\nAdditional Files Information:\n{file_context}")

        lines.append("")
        lines.append(f"The student is asking: {query}")
        lines.append("")
        lines.append(GUIDANCE_INSTRUCTION)
        return "\n".join(lines)
