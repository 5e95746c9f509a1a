"""AI agent endpoints.

Agents are per-company assistant configurations. Agent names are unique
within a company. Writes require ADMIN.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth.dependencies import require_role
from ..auth.roles import UserRole
from ..database import get_db
from ..dependencies import TenantQuery, get_company_id
from ..models.ai_agent import AIAgent
from ..models.user import User
from .schemas import AIAgentCount, AIAgentCreate, AIAgentResponse, AIAgentUpdate


router = APIRouter(prefix="/ai-agents", tags=["AI Agents"])

DUPLICATE_NAME = "AI agent with this name already exists"
NOT_FOUND = "AI agent not found"


def _name_taken(db: Session, company_id: UUID, name: str, exclude_id: UUID = None) -> bool:
    query = TenantQuery.scoped_query(db, AIAgent, company_id).filter(AIAgent.agent_name == name)
    if exclude_id:
        query = query.filter(AIAgent.id != exclude_id)
    return query.first() is not None


@router.post("", response_model=AIAgentResponse, status_code=status.HTTP_201_CREATED)
def create_agent(
    data: AIAgentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
):
    if _name_taken(db, current_user.company_id, data.agent_name):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_NAME)

    agent = AIAgent(company_id=current_user.company_id, **data.model_dump())
    db.add(agent)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_NAME)

    db.refresh(agent)
    return agent


@router.get("", response_model=List[AIAgentResponse])
def list_agents(
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_company_id),
):
    return (
        TenantQuery.scoped_query(db, AIAgent, company_id)
        .order_by(AIAgent.created_at.desc())
        .all()
    )


@router.get("/count", response_model=AIAgentCount)
def count_agents(
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_company_id),
):
    return AIAgentCount(count=TenantQuery.scoped_query(db, AIAgent, company_id).count())


@router.get("/{agent_id}", response_model=AIAgentResponse)
def get_agent(
    agent_id: UUID,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_company_id),
):
    return TenantQuery.get_or_404(db, AIAgent, agent_id, company_id, detail=NOT_FOUND)


@router.patch("/{agent_id}", response_model=AIAgentResponse)
def update_agent(
    agent_id: UUID,
    data: AIAgentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
):
    agent = TenantQuery.get_or_404(db, AIAgent, agent_id, current_user.company_id, detail=NOT_FOUND)
    changes = data.model_dump(exclude_unset=True)

    new_name = changes.get("agent_name")
    if new_name and _name_taken(db, current_user.company_id, new_name, exclude_id=agent.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_NAME)

    for field, value in changes.items():
        if value is None and field != "avatar":
            continue
        setattr(agent, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_NAME)

    db.refresh(agent)
    return agent


@router.delete("/{agent_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_agent(
    agent_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
):
    agent = TenantQuery.get_or_404(db, AIAgent, agent_id, current_user.company_id, detail=NOT_FOUND)
    db.delete(agent)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
