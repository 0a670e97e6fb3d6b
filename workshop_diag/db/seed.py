import asyncio
import logging
import os
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from workshop_diag.db.models import CommonProblem, SessionLocal, init_db
from workshop_diag.db import mongo

logger = logging.getLogger(__name__)

_ID_NAMESPACE = uuid.UUID("6f1c2a64-2d1e-4f3a-9a57-0c4f0d3b8e21")


def _p(name, category, severity, cost, description, symptoms, solutions) -> Dict[str, Any]:
    return {
        "name": name,
        "category": category,
        "severity": severity,
        "estimated_cost": cost,
        "description": description,
        "symptoms": symptoms,
        "solutions": solutions,
    }


COMMON_PROBLEMS: List[Dict[str, Any]] = [
    # motor
    _p("Óleo abaixo do mínimo", "motor", "medium", 150.0,
       "Nível de óleo do motor abaixo do recomendado",
       ["luz do óleo acesa", "ruído no motor", "motor superaquecendo"],
       ["Verificar nível de óleo", "Trocar óleo e filtro", "Verificar vazamentos"]),
    _p("Motor superaquecendo", "motor", "high", 500.0,
       "Temperatura do motor acima do normal",
       ["temperatura alta no painel", "vapor saindo do capô", "motor desligando sozinho"],
       ["Verificar nível de água/fluido do radiador", "Verificar termostato",
        "Verificar bomba d'água", "Verificar vazamentos no sistema de arrefecimento"]),
    _p("Ruído no motor", "motor", "medium", 800.0,
       "Ruídos anormais vindos do motor",
       ["barulho no motor", "ruído estranho", "batida no motor"],
       ["Diagnóstico completo do motor", "Verificar correias",
        "Verificar bomba d'água", "Verificar alternador"]),
    # freios
    _p("Pastilhas de freio desgastadas", "freios", "high", 300.0,
       "Pastilhas de freio com desgaste excessivo",
       ["ruído no freio", "barulho ao frear", "freio rangendo", "pedal de freio baixo"],
       ["Trocar pastilhas de freio", "Verificar discos", "Verificar fluido de freio"]),
    _p("Disco de freio empenado", "freios", "medium", 600.0,
       "Discos de freio com empenamento ou desgaste irregular",
       ["tremor no volante ao frear", "vibração ao frear", "ruído ao frear"],
       ["Retificar ou trocar discos", "Trocar pastilhas", "Verificar pinças"]),
    _p("Fluido de freio baixo", "freios", "high", 150.0,
       "Nível de fluido de freio abaixo do recomendado",
       ["pedal de freio mole", "pedal vai até o chão", "luz do freio acesa"],
       ["Completar fluido de freio", "Verificar vazamentos", "Trocar fluido se necessário"]),
    # suspensao
    _p("Amortecedor com vazamento", "suspensao", "medium", 400.0,
       "Amortecedor apresentando vazamento de óleo",
       ["carro balançando muito", "suspensão mole", "barulho na suspensão"],
       ["Trocar amortecedor", "Verificar batentes", "Verificar coxins"]),
    _p("Bieleta da suspensão solta", "suspensao", "medium", 250.0,
       "Bieleta da suspensão com folga ou solta",
       ["barulho na suspensão", "ruído ao passar em buracos", "instabilidade na direção"],
       ["Trocar bieleta", "Verificar outros componentes da suspensão"]),
    # bateria / eletrica
    _p("Bateria fraca ou descarregada", "bateria", "medium", 400.0,
       "Bateria com carga baixa ou descarregada",
       ["carro não liga", "luzes fracas", "bateria descarregada", "alternador não carrega"],
       ["Recarregar bateria", "Trocar bateria se necessário",
        "Verificar alternador", "Verificar sistema de carga"]),
    _p("Alternador com problema", "eletrica", "high", 600.0,
       "Alternador não está carregando a bateria",
       ["bateria descarregando", "luz da bateria acesa", "luzes piscando"],
       ["Verificar alternador", "Trocar alternador se necessário", "Verificar correia do alternador"]),
    _p("Fusível queimado", "eletrica", "low", 50.0,
       "Fusível queimado causando falha elétrica",
       ["componente elétrico não funciona", "luz não acende", "som não funciona"],
       ["Identificar fusível queimado", "Trocar fusível", "Verificar causa do problema"]),
    # ar condicionado
    _p("Ar condicionado sem gás", "ar_condicionado", "low", 200.0,
       "Sistema de ar condicionado sem gás refrigerante",
       ["ar não gelando", "ar quente", "ar condicionado não funciona"],
       ["Recarregar gás", "Verificar vazamentos", "Verificar compressor"]),
    _p("Compressor de ar condicionado com problema", "ar_condicionado", "high", 800.0,
       "Compressor do ar condicionado com defeito",
       ["ar não gelando", "barulho no compressor", "compressor não liga"],
       ["Verificar compressor", "Trocar compressor se necessário", "Verificar sistema completo"]),
    # pneus
    _p("Pneus desgastados", "pneus", "high", 800.0,
       "Pneus com desgaste excessivo ou irregular",
       ["pneu careca", "desgaste irregular", "pneu furado"],
       ["Trocar pneus", "Verificar alinhamento", "Verificar balanceamento"]),
    _p("Pneu furado", "pneus", "medium", 100.0,
       "Pneu com furo ou dano",
       ["pneu murcho", "pneu furado", "perda de pressão"],
       ["Reparar ou trocar pneu", "Verificar válvula", "Verificar pressão"]),
    # transmissao
    _p("Óleo da transmissão baixo", "transmissao", "high", 300.0,
       "Nível de óleo da transmissão abaixo do recomendado",
       ["marcha não entra", "transmissão patinando", "ruído na transmissão"],
       ["Completar óleo da transmissão", "Trocar óleo se necessário", "Verificar vazamentos"]),
    # radiador / refrigeracao
    _p("Radiador com vazamento", "radiador", "high", 500.0,
       "Radiador apresentando vazamento",
       ["água vazando", "temperatura alta", "nível de água baixo"],
       ["Reparar ou trocar radiador", "Verificar mangueiras", "Verificar tampa do radiador"]),
    _p("Termostato com defeito", "refrigeracao", "medium", 200.0,
       "Termostato não está funcionando corretamente",
       ["motor superaquecendo", "temperatura não sobe", "temperatura irregular"],
       ["Trocar termostato", "Verificar sistema de arrefecimento"]),
    # direcao
    _p("Fluido de direção baixo", "direcao", "medium", 150.0,
       "Nível de fluido de direção abaixo do recomendado",
       ["direção pesada", "barulho na direção", "direção dura"],
       ["Completar fluido de direção", "Verificar vazamentos", "Verificar bomba de direção"]),
]


def problem_id(name: str) -> str:
    # Stable across stores and reseeds
    return str(uuid.uuid5(_ID_NAMESPACE, name))


def seed(db: Optional[Session] = None) -> int:
    own_session = db is None
    if own_session:
        init_db()
        db = SessionLocal()
    try:
        existing = {r.name: r for r in db.query(CommonProblem).all()}
        for data in COMMON_PROBLEMS:
            rec = existing.get(data["name"])
            if rec is None:
                db.add(CommonProblem(id=problem_id(data["name"]), is_active=True, **data))
                continue
            for key, value in data.items():
                setattr(rec, key, value)
            rec.is_active = True
        db.commit()
    finally:
        if own_session:
            db.close()
    logger.info("Seeded %d common problems", len(COMMON_PROBLEMS))
    return len(COMMON_PROBLEMS)


async def seed_mongo(db) -> int:
    collection = db[mongo.PROBLEMS_COLLECTION]
    for data in COMMON_PROBLEMS:
        doc = dict(data, id=problem_id(data["name"]), is_active=True)
        await collection.update_one({"name": data["name"]}, {"$set": doc}, upsert=True)
    logger.info("Seeded %d common problems into %s", len(COMMON_PROBLEMS), mongo.PROBLEMS_COLLECTION)
    return len(COMMON_PROBLEMS)


async def _seed_mongo_main() -> None:
    await mongo.init_db()
    async for db in mongo.get_db():
        await seed_mongo(db)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    if os.getenv("CATALOG_BACKEND", "sql").strip().lower() == "mongo":
        asyncio.run(_seed_mongo_main())
    else:
        seed()
