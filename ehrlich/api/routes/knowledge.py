"""
EHRLICH — Knowledge Routes

Перегляд каталогу бази знань.
"""

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_knowledge, KnowledgeManager

router = APIRouter(prefix="/diseases", tags=["Knowledge"])


@router.get("")
async def list_diseases(
    limit: int = 100,
    offset: int = 0,
    knowledge: KnowledgeManager = Depends(get_knowledge)
) -> dict:
    """Отримати список хвороб у порядку опитування"""
    diseases = knowledge.disease_list
    return {
        "diseases": diseases[offset:offset + limit],
        "total": len(diseases),
        "limit": limit,
        "offset": offset
    }


@router.get("/{disease_id}")
async def get_disease(
    disease_id: str,
    knowledge: KnowledgeManager = Depends(get_knowledge)
) -> dict:
    """Отримати хворобу з її симптомами"""
    if knowledge.provider is None:
        raise HTTPException(status_code=503, detail="Knowledge base not loaded")
    
    disease = knowledge.provider.get_disease(disease_id)
    if disease is None:
        raise HTTPException(status_code=404, detail=f"Disease '{disease_id}' not found")
    
    return {
        "disease_id": disease.disease_id,
        "full_name": disease.full_name,
        "symptoms": [
            {
                "symptom_id": s.symptom_id,
                "text": s.text,
                "weight": s.weight,
                "kind": s.kind.value,
                "female_only": s.female_only,
                "pediatric_only": s.pediatric_only,
            }
            for s in knowledge.provider.symptoms_of(disease_id)
        ],
    }
