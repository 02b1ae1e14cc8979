"""
Synoptic code database model.

The SYNOP report of one observation slot, as generated from its cards and
optionally corrected by the observer. At most one per observing time.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from obsdesk.models.base import BaseModel
from obsdesk.utils.synoptic_code import SYNOPTIC_GROUP_FIELDS


class SynopticCode(BaseModel):
    """Stored synoptic report, one column per code group."""

    __tablename__ = "synoptic_codes"

    observing_time_id = Column(
        Integer,
        ForeignKey("observing_times.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Observation slot the report encodes"
    )
    station_id = Column(
        Integer,
        ForeignKey("stations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Reference to the weather station"
    )
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    data_type = Column(String(10), nullable=False, default="SYNOP")

    # Code groups, report order 0..20
    c1 = Column(String(255), default="")
    iliii = Column(String(255), default="")
    irixhvv = Column(String(255), default="")
    nddff = Column(String(255), default="")
    s1nttt = Column(String(255), default="")
    s2ntdtdtd = Column(String(255), default="")
    p3ppp4pppp = Column(String(255), default="")
    rrrtr6 = Column(String(255), default="")
    ww_w1w2 = Column(String(255), default="")
    nh_cl_cm_ch = Column(String(255), default="")
    s2ntntntn_inininin = Column(String(255), default="")
    d56_dl_dm_dh = Column(String(255), default="")
    cd57_da_ec = Column(String(255), default="")
    avg_total_cloud = Column(String(255), default="")
    c2 = Column(String(255), default="")
    gg = Column(String(255), default="")
    p24_group_58_59 = Column(String(255), default="")
    r24_group_6_7 = Column(String(255), default="")
    ns_ch_hs = Column(String(255), default="", comment="Significant cloud layers, ' / ' separated")
    dqqqt90 = Column(String(255), default="")
    fqfqfq91 = Column(String(255), default="")

    weather_remark = Column(String(255), default="", comment="Observer initials or remark")

    observing_time = relationship("ObservingTime", back_populates="synoptic_codes")
    station = relationship("Station")

    __table_args__ = (
        UniqueConstraint('observing_time_id', name='uq_synoptic_code_observing_time'),
    )

    @property
    def measurements(self):
        return [getattr(self, field) or "" for field in SYNOPTIC_GROUP_FIELDS]

    def __repr__(self):
        return f"<SynopticCode(station_id={self.station_id}, observing_time_id={self.observing_time_id})>"
