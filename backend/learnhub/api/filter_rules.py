"""
CMS filter rules API (/cms-filter-config): per-level rules the admin hierarchy applies.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from learnhub.database import get_db
from learnhub.models.filter_rule import CmsFilterConfig
from learnhub.schemas.filter_rule import (
    FilterRuleCreateRequest,
    FilterRuleResponse,
    FilterRuleUpdateRequest,
)

router = APIRouter(prefix="/cms-filter-config", tags=["cms-filter-config"])
logger = logging.getLogger(__name__)


def _get_rule_or_404(db: Session, rule_id: str) -> CmsFilterConfig:
    rule = db.query(CmsFilterConfig).filter(CmsFilterConfig.id == rule_id).first()
    if not rule:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Filter rule not found")
    return rule


@router.get("", response_model=list[FilterRuleResponse])
def list_filter_rules(db: Session = Depends(get_db)):
    return db.query(CmsFilterConfig).order_by(CmsFilterConfig.level, CmsFilterConfig.name).all()


@router.get("/level/{level}", response_model=list[FilterRuleResponse])
def list_level_rules(level: int, db: Session = Depends(get_db)):
    """Active rules for one hierarchy level."""
    return (
        db.query(CmsFilterConfig)
        .filter(CmsFilterConfig.level == level, CmsFilterConfig.is_active.is_(True))
        .order_by(CmsFilterConfig.name)
        .all()
    )


@router.get("/{rule_id}", response_model=FilterRuleResponse)
def get_filter_rule(rule_id: str, db: Session = Depends(get_db)):
    return _get_rule_or_404(db, rule_id)


@router.post("", response_model=FilterRuleResponse, status_code=status.HTTP_201_CREATED)
def create_filter_rule(data: FilterRuleCreateRequest, db: Session = Depends(get_db)):
    rule = CmsFilterConfig(**data.model_dump())
    db.add(rule)
    db.commit()
    db.refresh(rule)
    logger.info("Created filter rule id=%s level=%s type=%s", rule.id, rule.level, rule.filter_type)
    return rule


@router.put("/{rule_id}", response_model=FilterRuleResponse)
def update_filter_rule(rule_id: str, data: FilterRuleUpdateRequest, db: Session = Depends(get_db)):
    rule = _get_rule_or_404(db, rule_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field not in ("parent_level", "column_name", "column_value"):
            continue
        setattr(rule, field, value)
    if rule.filter_type == "column_value" and not (rule.column_name or "").strip():
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="column_value rules need column_name")
    db.commit()
    db.refresh(rule)
    return rule


@router.patch("/{rule_id}/toggle", response_model=FilterRuleResponse)
def toggle_filter_rule(rule_id: str, db: Session = Depends(get_db)):
    """Flip is_active."""
    rule = _get_rule_or_404(db, rule_id)
    rule.is_active = not rule.is_active
    db.commit()
    db.refresh(rule)
    logger.info("Filter rule %s is_active=%s", rule.id, rule.is_active)
    return rule


@router.delete("/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_filter_rule(rule_id: str, db: Session = Depends(get_db)):
    rule = _get_rule_or_404(db, rule_id)
    db.delete(rule)
    db.commit()
    logger.info("Deleted filter rule id=%s", rule_id)
    return None
