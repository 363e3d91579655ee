"""
Persistence service for BorderWatch.

This module wraps a SQLAlchemy session with the queries the API needs, one
method per operation, so routers never build queries themselves.
"""

import hashlib
import hmac
import secrets
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import and_, desc, func, or_
from sqlalchemy.orm import Session

from borderwatch.core.logging import logger
from borderwatch.models.alert import Alert
from borderwatch.models.chat import ChatMessage
from borderwatch.models.contact import EmergencyContact
from borderwatch.models.education import EducationResource
from borderwatch.models.report import Report, ReportComment, ReportStatus
from borderwatch.models.safe_zone import SafeZone
from borderwatch.models.threat import Threat, ThreatStatus
from borderwatch.models.user import User
from borderwatch.utils.geo import Coordinate, distance_km

PBKDF2_ITERATIONS = 260000


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """
    Hash a password with salted PBKDF2-SHA256.

    Returns:
        "pbkdf2_sha256$<iterations>$<salt>$<hex digest>"
    """
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), PBKDF2_ITERATIONS)
    return f"pbkdf2_sha256${PBKDF2_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        _, iterations, salt, expected = password_hash.split("$")
        digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), int(iterations))
    except ValueError:
        return False
    return hmac.compare_digest(digest.hex().encode(), expected.encode())


class Storage:
    """
    Data access for all BorderWatch entities over one session.

    Create methods commit and refresh, so returned rows carry their ids and
    server-side defaults.
    """

    def __init__(self, db: Session):
        self.db = db

    def _save(self, row):
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    @staticmethod
    def _apply(row, updates: Dict[str, Any]):
        for key, value in updates.items():
            setattr(row, key, value)

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def create_user(self, username: str, password: str, **fields) -> User:
        user = User(username=username, password_hash=hash_password(password), **fields)
        user = self._save(user)
        logger.info(f"Created user {user.id} ({user.username})")
        return user

    # Threats

    def get_threats(self, limit: int = 50) -> List[Threat]:
        return (
            self.db.query(Threat)
            .order_by(desc(Threat.created_at), desc(Threat.id))
            .limit(limit)
            .all()
        )

    def get_threat(self, threat_id: int) -> Optional[Threat]:
        return self.db.query(Threat).filter(Threat.id == threat_id).first()

    def create_threat(self, **fields) -> Threat:
        threat = self._save(Threat(**fields))
        logger.info(f"Created threat {threat.id}: {threat.severity.value} {threat.title}")
        return threat

    def update_threat(self, threat_id: int, updates: Dict[str, Any]) -> Optional[Threat]:
        threat = self.get_threat(threat_id)
        if threat is None:
            return None
        self._apply(threat, updates)
        return self._save(threat)

    def get_active_threat_count(self) -> int:
        return self.db.query(func.count(Threat.id)).filter(Threat.status == ThreatStatus.ACTIVE).scalar()

    # Reports

    def get_reports(self, user_id: Optional[int] = None) -> List[Report]:
        query = self.db.query(Report)
        if user_id is not None:
            query = query.filter(Report.user_id == user_id)
        return query.order_by(desc(Report.created_at), desc(Report.id)).all()

    def get_report(self, report_id: int) -> Optional[Report]:
        return self.db.query(Report).filter(Report.id == report_id).first()

    def create_report(self, **fields) -> Report:
        report = self._save(Report(**fields))
        logger.info(f"Created report {report.id}: {report.threat_type} ({report.urgency_level.value})")
        return report

    def update_report(self, report_id: int, updates: Dict[str, Any]) -> Optional[Report]:
        report = self.get_report(report_id)
        if report is None:
            return None
        self._apply(report, updates)
        return self._save(report)

    def get_pending_reports_count(self) -> int:
        return self.db.query(func.count(Report.id)).filter(Report.status == ReportStatus.PENDING).scalar()

    def get_report_comments(self, report_id: int) -> List[ReportComment]:
        return (
            self.db.query(ReportComment)
            .filter(ReportComment.report_id == report_id)
            .order_by(desc(ReportComment.created_at), desc(ReportComment.id))
            .all()
        )

    def create_report_comment(self, report_id: int, **fields) -> ReportComment:
        return self._save(ReportComment(report_id=report_id, **fields))

    # Safe zones

    def get_safe_zones(
        self,
        origin: Optional[Coordinate] = None,
        radius_km: Optional[float] = None,
    ) -> List[Tuple[SafeZone, Optional[float]]]:
        """
        Active safe zones, optionally restricted to a radius around origin.

        Returns:
            (zone, distance in km) pairs. With an origin the list is sorted
            nearest first; without one the distance is None.
        """
        zones = self.db.query(SafeZone).filter(SafeZone.is_active == True).order_by(SafeZone.id).all()
        if origin is None:
            return [(zone, None) for zone in zones]

        results = []
        for zone in zones:
            location = zone.location or {}
            try:
                d = distance_km(origin, Coordinate(float(location["lat"]), float(location["lng"])))
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Safe zone {zone.id} has no usable location")
                continue
            if radius_km is None or d <= radius_km:
                results.append((zone, d))

        results.sort(key=lambda pair: pair[1])
        return results

    def get_safe_zone_count(self) -> int:
        return self.db.query(func.count(SafeZone.id)).filter(SafeZone.is_active == True).scalar()

    def create_safe_zone(self, **fields) -> SafeZone:
        return self._save(SafeZone(**fields))

    # Alerts

    def get_active_alerts(self, now: Optional[datetime] = None) -> List[Alert]:
        """Alerts that are active and not yet expired, newest first."""
        now = now or datetime.utcnow()
        return (
            self.db.query(Alert)
            .filter(
                Alert.is_active == True,
                or_(Alert.expires_at.is_(None), Alert.expires_at > now),
            )
            .order_by(desc(Alert.created_at), desc(Alert.id))
            .all()
        )

    def get_alert(self, alert_id: int) -> Optional[Alert]:
        return self.db.query(Alert).filter(Alert.id == alert_id).first()

    def create_alert(self, **fields) -> Alert:
        alert = self._save(Alert(**fields))
        logger.info(f"Created alert {alert.id}: {alert.severity.value} {alert.title}")
        return alert

    def update_alert(self, alert_id: int, updates: Dict[str, Any]) -> Optional[Alert]:
        alert = self.get_alert(alert_id)
        if alert is None:
            return None
        self._apply(alert, updates)
        return self._save(alert)

    # Education

    def get_education_resources(self, category: Optional[str] = None) -> List[EducationResource]:
        """Published resources, most important first."""
        query = self.db.query(EducationResource).filter(EducationResource.is_published == True)
        if category:
            query = query.filter(EducationResource.category == category)
        resources = query.order_by(EducationResource.id).all()
        return sorted(resources, key=lambda r: r.priority.rank, reverse=True)

    def get_education_resource(self, resource_id: int) -> Optional[EducationResource]:
        return self.db.query(EducationResource).filter(EducationResource.id == resource_id).first()

    def create_education_resource(self, **fields) -> EducationResource:
        return self._save(EducationResource(**fields))

    # Emergency contacts

    def get_emergency_contacts(self) -> List[EmergencyContact]:
        return (
            self.db.query(EmergencyContact)
            .filter(EmergencyContact.is_active == True)
            .order_by(EmergencyContact.priority, EmergencyContact.id)
            .all()
        )

    def create_emergency_contact(self, **fields) -> EmergencyContact:
        return self._save(EmergencyContact(**fields))

    # Chat

    def get_chat_messages(self, user_id: Optional[int] = None, receiver_id: Optional[int] = None) -> List[ChatMessage]:
        """
        Chat messages, newest first.

        With both ids, only the conversation between the two users; with
        just user_id, everything that user sent or received.
        """
        query = self.db.query(ChatMessage)
        if user_id is not None and receiver_id is not None:
            query = query.filter(or_(
                and_(ChatMessage.sender_id == user_id, ChatMessage.receiver_id == receiver_id),
                and_(ChatMessage.sender_id == receiver_id, ChatMessage.receiver_id == user_id),
            ))
        elif user_id is not None:
            query = query.filter(or_(ChatMessage.sender_id == user_id, ChatMessage.receiver_id == user_id))
        return query.order_by(desc(ChatMessage.created_at), desc(ChatMessage.id)).all()

    def get_chat_message(self, message_id: int) -> Optional[ChatMessage]:
        return self.db.query(ChatMessage).filter(ChatMessage.id == message_id).first()

    def create_chat_message(self, **fields) -> ChatMessage:
        return self._save(ChatMessage(**fields))

    def mark_message_as_read(self, message_id: int) -> Optional[ChatMessage]:
        message = self.get_chat_message(message_id)
        if message is None:
            return None
        message.is_read = True
        return self._save(message)
