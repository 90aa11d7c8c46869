# personalization/chat_engine.py
"""
Chat flow for the travel assistant.

    no_history --seed outreach--> awaiting_user_input
    awaiting_user_input --user message--> ai_typing --reply saved--> awaiting_user_input

The AI reply is a canned response saved after a fixed typing delay. The
delay runs on a timer thread and is never cancelled; a delay of 0 saves
the reply before send_message returns.
"""
import logging
import threading

from personalization.models import AIPersonality, ChatContext, ChatMessage
from personalization.response_selector import (SEED_OUTREACH_MESSAGE,
                                               PersonalizedResponseSelector, infer_mood)

logger = logging.getLogger(__name__)

NO_HISTORY = 'no_history'
AWAITING_USER_INPUT = 'awaiting_user_input'
AI_TYPING = 'ai_typing'

AI_REPLY_DELAY = 1.5


class ChatEngine:
    def __init__(self, storage, selector=None, reply_delay=AI_REPLY_DELAY,
                 timer_factory=threading.Timer):
        self.storage = storage
        self.selector = selector or PersonalizedResponseSelector()
        self.reply_delay = reply_delay
        self.timer_factory = timer_factory
        self.ai_personality = AIPersonality(response_style='friendly', knowledge_level='expert',
                                            enthusiasm=85)
        self._typing = {}
        self._lock = threading.Lock()

    # -------------------------
    # STATE
    # -------------------------
    def state(self, user_id):
        with self._lock:
            if self._typing.get(user_id):
                return AI_TYPING
        if not self.storage.get_chat_history(user_id):
            return NO_HISTORY
        return AWAITING_USER_INPUT

    def start_conversation(self, user_id):
        """Send the seed outreach message if the user has never chatted."""
        if self.storage.get_chat_history(user_id):
            return None
        logger.info(f"[Chat] seeding conversation for {user_id}")
        return self.send_message(ChatMessage(message=SEED_OUTREACH_MESSAGE, sender='user',
                                             user_id=user_id))

    # -------------------------
    # MESSAGES
    # -------------------------
    def send_message(self, message):
        saved = self.storage.save_chat_message(message)
        if message.sender != 'user':
            return saved

        user_id = message.user_id or 'demo-user'
        reply = self.build_reply(user_id, message)
        with self._lock:
            self._typing[user_id] = self._typing.get(user_id, 0) + 1

        if self.reply_delay <= 0:
            self._deliver(user_id, reply)
        else:
            timer = self.timer_factory(self.reply_delay, self._deliver, args=(user_id, reply))
            timer.daemon = True
            timer.start()
        return saved

    def build_reply(self, user_id, message):
        dna = self._dna(user_id)
        context = message.context or ChatContext()
        reply_context = ChatContext(
            current_location=context.current_location,
            mood=context.mood or infer_mood(message.message),
            related_recommendations=context.related_recommendations,
            personalized_tone=self.selector.select_tone(dna).tone,
        )
        return ChatMessage(
            message=self.storage.get_personalized_chat_response(user_id, message.message,
                                                                message.context),
            sender='ai',
            user_id=message.user_id,
            context=reply_context,
            ai_personality=self.ai_personality,
        )

    def _deliver(self, user_id, reply):
        try:
            self.storage.save_chat_message(reply)
            logger.info(f"[Chat] AI reply saved for {user_id}")
        finally:
            with self._lock:
                remaining = self._typing.get(user_id, 1) - 1
                if remaining > 0:
                    self._typing[user_id] = remaining
                else:
                    self._typing.pop(user_id, None)

    # -------------------------
    # PERSONA
    # -------------------------
    def personalized_response(self, user_id, text, context=None):
        return self.storage.get_personalized_chat_response(user_id, text, context)

    def persona(self, user_id):
        dna = self._dna(user_id)
        tone = self.selector.select_tone(dna)
        return {
            'tone': tone.to_dict(),
            'welcome': self.selector.welcome_message(dna, tone.tone),
            'adaptiveIntro': self.selector.adaptive_intro(dna, tone.tone),
            'followUp': self.selector.follow_up_question(tone.tone),
            'quickReplies': self.selector.quick_replies(dna),
            'suggestions': self.selector.suggestions(dna),
            'state': self.state(user_id),
        }

    def _dna(self, user_id):
        user = self.storage.get_user(user_id)
        return user.travel_dna if user else None
