"""R&D models: requests, their event trail, attachments and sample results."""

from sqlalchemy import Column, Integer, String, Text, BigInteger, Float, Date, DateTime, ForeignKey, func
from foodtech.db.base import Base


class RdRequest(Base):
    """Customer request for a new product sample."""
    __tablename__ = "rd_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(String(50), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    customer = Column(String(255), nullable=True)
    direction = Column(String(100), nullable=True)
    status = Column(String(50), nullable=False, default="pending")
    author_id = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class RequestEvent(Base):
    """Event on an R&D request. The actor is recorded by email only."""
    __tablename__ = "request_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    request_id = Column(Integer, ForeignKey("rd_requests.id", ondelete="CASCADE"), nullable=False, index=True)
    event_type = Column(String(100), nullable=False)
    actor_email = Column(String(255), nullable=True, index=True)
    payload_json = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)


class RdRequestAttachment(Base):
    """Metadata row for a file attached to an R&D request (optionally to one of its events)."""
    __tablename__ = "rd_request_attachments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    request_id = Column(Integer, ForeignKey("rd_requests.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("request_events.id", ondelete="SET NULL"), nullable=True)
    file_name = Column(String(500), nullable=False)
    file_path = Column(String(1000), nullable=False)
    file_type = Column(String(150), nullable=False)
    file_size = Column(BigInteger, nullable=False, default=0)
    uploaded_by = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)


class DevelopmentSample(Base):
    """Sample produced from a development recipe."""
    __tablename__ = "development_samples"

    id = Column(Integer, primary_key=True, autoincrement=True)
    request_id = Column(Integer, ForeignKey("rd_requests.id", ondelete="CASCADE"), nullable=False, index=True)
    recipe_id = Column(Integer, nullable=True)
    sample_code = Column(String(50), nullable=True)
    batch_weight_g = Column(Float, nullable=True)
    status = Column(String(50), nullable=False, default="Draft")
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class DevelopmentSampleLabResult(Base):
    """Laboratory measurements for a sample (one row per sample)."""
    __tablename__ = "development_sample_lab_results"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sample_id = Column(Integer, ForeignKey("development_samples.id", ondelete="CASCADE"), nullable=False, unique=True)
    bulk_density_g_dm3 = Column(Float, nullable=True)
    appearance = Column(Text, nullable=True)
    color = Column(Text, nullable=True)
    smell = Column(Text, nullable=True)
    taste = Column(Text, nullable=True)
    chlorides_pct = Column(Float, nullable=True)
    phosphates_pct = Column(Float, nullable=True)
    moisture_pct = Column(Float, nullable=True)
    ph_value = Column(Float, nullable=True)
    hydration = Column(Text, nullable=True)
    gel_strength_g_cm3 = Column(Float, nullable=True)
    viscosity_cps = Column(Float, nullable=True)
    colority = Column(Float, nullable=True)
    additional_info = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class DevelopmentSamplePilot(Base):
    """Pilot tasting sheet for a sample (one row per sample)."""
    __tablename__ = "development_sample_pilot"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sample_id = Column(Integer, ForeignKey("development_samples.id", ondelete="CASCADE"), nullable=False, unique=True)
    tasting_sheet_no = Column(String(50), nullable=True)
    tasting_date = Column(Date, nullable=True)
    direction = Column(String(100), nullable=True)
    tasting_goal = Column(Text, nullable=True)
    score_appearance = Column(Integer, nullable=True)
    score_color = Column(Integer, nullable=True)
    score_aroma = Column(Integer, nullable=True)
    score_taste = Column(Integer, nullable=True)
    score_consistency = Column(Integer, nullable=True)
    score_juiciness = Column(Integer, nullable=True)
    score_break_moisture = Column(Integer, nullable=True)
    score_syneresis = Column(Integer, nullable=True)
    score_curl_formation = Column(Integer, nullable=True)
    score_cut_pattern = Column(Integer, nullable=True)
    score_fibers = Column(Integer, nullable=True)
    score_structure_density = Column(Integer, nullable=True)
    score_air_inclusions = Column(Integer, nullable=True)
    score_overall = Column(Integer, nullable=True)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
