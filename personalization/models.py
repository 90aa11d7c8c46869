# personalization/models.py
"""
Data models for TravelMate.

Every record is a plain dataclass. ``to_dict`` produces the camelCase JSON
shape the HTTP API has always used, ``from_dict`` parses it back and raises
ValidationError on missing required fields or unknown enum values.
"""
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from personalization.adaptive_itinerary import format_duration, parse_duration
from personalization.errors import ValidationError

CROWD_LEVELS = ("low", "medium", "high")
ACTION_TYPES = ("visit", "skip", "favorite", "rate", "view", "search")
ITEM_TYPES = ("recommendation", "itinerary_item", "local_place", "chat_message")
COMPANION_TYPES = ("solo", "couple", "family", "friends")
SENDERS = ("user", "ai")
TONES = ("casual", "formal", "humorous", "enthusiastic")


# -------------------------
# HELPERS
# -------------------------
def new_id():
    return str(uuid.uuid4())


def camel_to_snake(name):
    return re.sub(r'(?<!^)(?=[A-Z])', '_', name).lower()


def _require(data, key):
    if not isinstance(data, dict):
        raise ValidationError(f"Expected an object, got {type(data).__name__}")
    value = data.get(key)
    if value is None:
        raise ValidationError(f"Missing required field '{key}'")
    return value


def _choice(value, allowed, field_name):
    if value is None:
        return None
    if value not in allowed:
        raise ValidationError(f"Invalid {field_name} '{value}', expected one of {', '.join(allowed)}")
    return value


def _int(value, field_name):
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Field '{field_name}' must be an integer")


def clamp_score(value, low=0, high=100):
    return min(high, max(low, value))


def _score(data, key):
    return clamp_score(_int(_require(data, key), key))


def _float(value, field_name):
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Field '{field_name}' must be a number")


def _iso(value):
    return value.isoformat() if value else None


def _parse_time(value):
    if not value:
        return datetime.now()
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid timestamp '{value}'")


def _drop_none(data):
    return {k: v for k, v in data.items() if v is not None}


# -------------------------
# VALUE OBJECTS
# -------------------------
@dataclass
class Location:
    latitude: float
    longitude: float
    city: str = ""
    country: Optional[str] = None
    address: Optional[str] = None
    neighborhood: Optional[str] = None
    timezone: Optional[str] = None

    def to_dict(self):
        return _drop_none({
            "latitude": self.latitude,
            "longitude": self.longitude,
            "city": self.city,
            "country": self.country,
            "address": self.address,
            "neighborhood": self.neighborhood,
            "timezone": self.timezone,
        })

    @classmethod
    def from_dict(cls, data):
        if data is None:
            return None
        return cls(
            latitude=_float(_require(data, "latitude"), "latitude"),
            longitude=_float(_require(data, "longitude"), "longitude"),
            city=data.get("city", ""),
            country=data.get("country"),
            address=data.get("address"),
            neighborhood=data.get("neighborhood"),
            timezone=data.get("timezone"),
        )


@dataclass
class CrowdData:
    crowd_level: str
    peak_hours: List[str] = field(default_factory=list)
    best_time_to_visit: str = ""
    last_updated: Optional[str] = None

    def to_dict(self):
        return {
            "peakHours": list(self.peak_hours),
            "bestTimeToVisit": self.best_time_to_visit,
            "crowdLevel": self.crowd_level,
            "lastUpdated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data):
        if data is None:
            return None
        return cls(
            crowd_level=_choice(_require(data, "crowdLevel"), CROWD_LEVELS, "crowdLevel"),
            peak_hours=list(data.get("peakHours") or []),
            best_time_to_visit=data.get("bestTimeToVisit", ""),
            last_updated=data.get("lastUpdated"),
        )


@dataclass
class LocalInsights:
    discovered_by: Optional[str] = None
    local_tips: List[str] = field(default_factory=list)
    seasonal_info: Optional[str] = None
    accessibility_info: Optional[str] = None
    price_range: Optional[str] = None

    def to_dict(self):
        return _drop_none({
            "discoveredBy": self.discovered_by,
            "localTips": list(self.local_tips),
            "seasonalInfo": self.seasonal_info,
            "accessibilityInfo": self.accessibility_info,
            "priceRange": self.price_range,
        })

    @classmethod
    def from_dict(cls, data):
        if data is None:
            return None
        # local places have always sent their tips as "tips"
        tips = data.get("localTips", data.get("tips")) or []
        return cls(
            discovered_by=data.get("discoveredBy"),
            local_tips=list(tips),
            seasonal_info=data.get("seasonalInfo"),
            accessibility_info=data.get("accessibilityInfo"),
            price_range=data.get("priceRange"),
        )


@dataclass
class Weather:
    condition: str
    temp: Optional[float] = None

    @classmethod
    def from_dict(cls, data):
        if not data:
            return None
        return cls(condition=str(_require(data, "condition")).lower(), temp=data.get("temp"))


@dataclass
class PreferenceFlags:
    skips_cultural: bool = False
    loves_nature: bool = False
    prefers_quiet_places: bool = False

    def to_dict(self):
        return {
            "skipsCultural": self.skips_cultural,
            "lovesNature": self.loves_nature,
            "prefersQuietPlaces": self.prefers_quiet_places,
        }


@dataclass
class PersonaTone:
    tone: str = "casual"
    expertise: int = 75
    empathy: int = 85

    def to_dict(self):
        return {"tone": self.tone, "expertise": self.expertise, "empathy": self.empathy}


# -------------------------
# ENTITIES
# -------------------------
@dataclass
class TravelDNA:
    adventure_seeker: int
    spontaneous: int
    cultural: int
    social: int
    active: int
    personality: str
    preferences: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            "adventureSeeker": self.adventure_seeker,
            "spontaneous": self.spontaneous,
            "cultural": self.cultural,
            "social": self.social,
            "active": self.active,
            "personality": self.personality,
            "preferences": list(self.preferences),
        }

    @classmethod
    def from_dict(cls, data):
        if data is None:
            return None
        return cls(
            adventure_seeker=_score(data, "adventureSeeker"),
            spontaneous=_score(data, "spontaneous"),
            cultural=_score(data, "cultural"),
            social=_score(data, "social"),
            active=_score(data, "active"),
            personality=data.get("personality", "The Explorer"),
            preferences=list(data.get("preferences") or []),
        )


@dataclass
class User:
    username: str
    password: str
    id: str = field(default_factory=new_id)
    travel_dna: Optional[TravelDNA] = None
    current_location: Optional[Location] = None
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self, include_password=False):
        data = {
            "id": self.id,
            "username": self.username,
            "travelDNA": self.travel_dna.to_dict() if self.travel_dna else None,
            "currentLocation": self.current_location.to_dict() if self.current_location else None,
            "createdAt": _iso(self.created_at),
        }
        if include_password:
            data["password"] = self.password
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get("id") or new_id(),
            username=_require(data, "username"),
            password=_require(data, "password"),
            travel_dna=TravelDNA.from_dict(data.get("travelDNA")),
            current_location=Location.from_dict(data.get("currentLocation")),
            created_at=_parse_time(data.get("createdAt")),
        )


@dataclass
class QuizResponse:
    question_index: int
    answer: str
    user_id: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "questionIndex": self.question_index,
            "answer": self.answer,
            "createdAt": _iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get("id") or new_id(),
            user_id=data.get("userId"),
            question_index=_int(_require(data, "questionIndex"), "questionIndex"),
            answer=str(_require(data, "answer")),
            created_at=_parse_time(data.get("createdAt")),
        )


@dataclass
class Recommendation:
    title: str
    description: str
    rating: int
    category: str
    id: str = field(default_factory=new_id)
    image_url: str = ""
    moods: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    is_hidden_gem: bool = True
    location: Optional[Location] = None
    crowd_data: Optional[CrowdData] = None
    local_insights: Optional[LocalInsights] = None

    @property
    def display_rating(self):
        # ratings are stored as score x10
        return f"{self.rating / 10:.1f}"

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "imageUrl": self.image_url,
            "rating": self.rating,
            "displayRating": self.display_rating,
            "category": self.category,
            "moods": list(self.moods),
            "tags": list(self.tags),
            "isHiddenGem": self.is_hidden_gem,
            "location": self.location.to_dict() if self.location else None,
            "crowdData": self.crowd_data.to_dict() if self.crowd_data else None,
            "localInsights": self.local_insights.to_dict() if self.local_insights else None,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get("id") or new_id(),
            title=_require(data, "title"),
            description=_require(data, "description"),
            image_url=data.get("imageUrl", ""),
            rating=_int(_require(data, "rating"), "rating"),
            category=_require(data, "category"),
            moods=list(data.get("moods") or []),
            tags=list(data.get("tags") or []),
            is_hidden_gem=bool(data.get("isHiddenGem", True)),
            location=Location.from_dict(data.get("location")),
            crowd_data=CrowdData.from_dict(data.get("crowdData")),
            local_insights=LocalInsights.from_dict(data.get("localInsights")),
        )


@dataclass
class ItineraryItem:
    day: int
    title: str
    description: str
    start_time: str
    end_time: str
    category: str
    cost: int
    duration_minutes: int
    id: str = field(default_factory=new_id)
    user_id: Optional[str] = None
    image_url: str = ""
    tags: List[str] = field(default_factory=list)
    activity_type: Optional[str] = None
    is_completed: bool = False
    is_favorited: bool = False

    @property
    def duration(self):
        return format_duration(self.duration_minutes)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "day": self.day,
            "title": self.title,
            "description": self.description,
            "imageUrl": self.image_url,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "category": self.category,
            "cost": self.cost,
            "duration": self.duration,
            "durationMinutes": self.duration_minutes,
            "type": self.activity_type,
            "tags": list(self.tags),
            "isCompleted": self.is_completed,
            "isFavorited": self.is_favorited,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get("id") or new_id(),
            user_id=data.get("userId"),
            day=_int(_require(data, "day"), "day"),
            title=_require(data, "title"),
            description=data.get("description", ""),
            image_url=data.get("imageUrl", ""),
            start_time=_require(data, "startTime"),
            end_time=_require(data, "endTime"),
            category=_require(data, "category"),
            cost=_int(data.get("cost", 0), "cost"),
            duration_minutes=cls._minutes_from(data),
            activity_type=data.get("type"),
            tags=list(data.get("tags") or []),
            is_completed=bool(data.get("isCompleted", False)),
            is_favorited=bool(data.get("isFavorited", False)),
        )

    @staticmethod
    def _minutes_from(data):
        if data.get("durationMinutes") is not None:
            return _int(data["durationMinutes"], "durationMinutes")
        return parse_duration(data.get("duration"))

    @classmethod
    def changes_from_dict(cls, data):
        """Translate a camelCase partial update into checked attribute changes."""
        changes = {}
        for key, value in data.items():
            if key in ("id", "durationMinutes", "duration"):
                continue
            attr = "activity_type" if key == "type" else camel_to_snake(key)
            if attr not in cls.__dataclass_fields__:
                continue
            if attr in ("day", "cost"):
                changes[attr] = _int(_require(data, key), key)
            elif attr in ("title", "start_time", "end_time", "category"):
                changes[attr] = str(_require(data, key))
            elif attr in ("description", "image_url"):
                changes[attr] = "" if value is None else str(value)
            elif attr in ("is_completed", "is_favorited"):
                if not isinstance(value, bool):
                    raise ValidationError(f"Field '{key}' must be true or false")
                changes[attr] = value
            elif attr == "tags":
                if not isinstance(value, list):
                    raise ValidationError("Field 'tags' must be a list")
                changes[attr] = list(value)
            else:
                changes[attr] = value
        # the display string is derived, so only the minutes are stored
        if "durationMinutes" in data or "duration" in data:
            changes["duration_minutes"] = cls._minutes_from(data)
        return changes


@dataclass
class ChatContext:
    current_location: Optional[Dict] = None
    mood: Optional[str] = None
    related_recommendations: Optional[List[str]] = None
    personalized_tone: Optional[str] = None

    def to_dict(self):
        return _drop_none({
            "currentLocation": self.current_location,
            "mood": self.mood,
            "relatedRecommendations": self.related_recommendations,
            "personalizedTone": self.personalized_tone,
        })

    @classmethod
    def from_dict(cls, data):
        if not data:
            return None
        return cls(
            current_location=data.get("currentLocation"),
            mood=data.get("mood"),
            related_recommendations=data.get("relatedRecommendations"),
            personalized_tone=_choice(data.get("personalizedTone"), TONES, "personalizedTone"),
        )


@dataclass
class AIPersonality:
    response_style: str
    knowledge_level: str
    enthusiasm: int

    def to_dict(self):
        return {
            "responseStyle": self.response_style,
            "knowledgeLevel": self.knowledge_level,
            "enthusiasm": self.enthusiasm,
        }

    @classmethod
    def from_dict(cls, data):
        if not data:
            return None
        return cls(
            response_style=str(data.get("responseStyle", "friendly")),
            knowledge_level=str(data.get("knowledgeLevel", "expert")),
            enthusiasm=_int(data.get("enthusiasm", 85), "enthusiasm"),
        )


@dataclass
class ChatMessage:
    message: str
    sender: str
    user_id: Optional[str] = None
    id: str = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=datetime.now)
    context: Optional[ChatContext] = None
    ai_personality: Optional[AIPersonality] = None

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "message": self.message,
            "sender": self.sender,
            "timestamp": _iso(self.timestamp),
            "context": self.context.to_dict() if self.context else None,
            "aiPersonality": self.ai_personality.to_dict() if self.ai_personality else None,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get("id") or new_id(),
            user_id=data.get("userId"),
            message=str(_require(data, "message")),
            sender=_choice(_require(data, "sender"), SENDERS, "sender"),
            timestamp=_parse_time(data.get("timestamp")),
            context=ChatContext.from_dict(data.get("context")),
            ai_personality=AIPersonality.from_dict(data.get("aiPersonality")),
        )


@dataclass
class UserBehavior:
    action_type: str
    item_type: str
    user_id: Optional[str] = None
    id: str = field(default_factory=new_id)
    item_id: Optional[str] = None
    item_category: Optional[str] = None
    location: Optional[Location] = None
    mood: Optional[str] = None
    time_of_day: Optional[str] = None
    weather_condition: Optional[str] = None
    companion_type: Optional[str] = None
    rating: Optional[int] = None
    feedback: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "actionType": self.action_type,
            "itemId": self.item_id,
            "itemType": self.item_type,
            "itemCategory": self.item_category,
            "location": self.location.to_dict() if self.location else None,
            "mood": self.mood,
            "timeOfDay": self.time_of_day,
            "weatherCondition": self.weather_condition,
            "companionType": self.companion_type,
            "rating": self.rating,
            "feedback": self.feedback,
            "timestamp": _iso(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get("id") or new_id(),
            user_id=data.get("userId"),
            action_type=_choice(_require(data, "actionType"), ACTION_TYPES, "actionType"),
            item_id=data.get("itemId"),
            item_type=_choice(_require(data, "itemType"), ITEM_TYPES, "itemType"),
            item_category=data.get("itemCategory"),
            location=Location.from_dict(data.get("location")),
            mood=data.get("mood"),
            time_of_day=data.get("timeOfDay"),
            weather_condition=data.get("weatherCondition"),
            companion_type=_choice(data.get("companionType"), COMPANION_TYPES, "companionType"),
            rating=_int(data.get("rating"), "rating"),
            feedback=data.get("feedback"),
            timestamp=_parse_time(data.get("timestamp")),
        )


@dataclass
class LocalPlace:
    name: str
    category: str
    location: Location
    discovered_by: str
    id: str = field(default_factory=new_id)
    popularity: int = 0
    crowd_data: Optional[CrowdData] = None
    local_insights: Optional[LocalInsights] = None
    is_verified: bool = False
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "location": self.location.to_dict(),
            "discoveredBy": self.discovered_by,
            "popularity": self.popularity,
            "crowdData": self.crowd_data.to_dict() if self.crowd_data else None,
            "localInsights": self.local_insights.to_dict() if self.local_insights else None,
            "isVerified": self.is_verified,
            "createdAt": _iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get("id") or new_id(),
            name=_require(data, "name"),
            category=_require(data, "category"),
            location=Location.from_dict(_require(data, "location")),
            discovered_by=_require(data, "discoveredBy"),
            popularity=_int(data.get("popularity") or 0, "popularity"),
            crowd_data=CrowdData.from_dict(data.get("crowdData")),
            local_insights=LocalInsights.from_dict(data.get("localInsights")),
            is_verified=bool(data.get("isVerified", False)),
            created_at=_parse_time(data.get("createdAt")),
        )
