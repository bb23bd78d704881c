#!/usr/bin/env python
"""
Seed the three program stages with their default passage rules.

Run once after the initial migration:
  python scripts/seed_programs.py

Idempotent: existing programs are replaced and their cache entries dropped.
"""

from incubation.models import ProgramConfig, ProgramStage, RequiredDeliverable, Thresholds
from incubation.services import get_config_store

PROGRAMS = [
    ProgramConfig(
        key=ProgramStage.HOTEL_DE_PROJETOS,
        label="Hotel de Projetos",
        required_deliverables=[
            RequiredDeliverable(key="canvas", label="Business Model Canvas"),
        ],
        passage_thresholds=Thresholds(
            weighted_score_min=7.0,
            dimension_mins={
                "mercado": 7.0,
                "perfil_empreendedor": 6.5,
                "tecnologia_qualidade": 6.5,
                "gestao": 6.0,
                "financeiro": 6.0,
            },
        ),
    ),
    ProgramConfig(
        key=ProgramStage.PRE_RESIDENCIA,
        label="Pré-Residência",
        required_deliverables=[
            RequiredDeliverable(key="mvp_validado", label="MVP Evidenciado/Validado"),
        ],
        passage_thresholds=Thresholds(
            weighted_score_min=7.5,
            dimension_mins={
                "mercado": 7.5,
                "perfil_empreendedor": 7.0,
                "tecnologia_qualidade": 7.0,
                "gestao": 6.8,
                "financeiro": 6.8,
            },
        ),
    ),
    ProgramConfig(
        key=ProgramStage.RESIDENCIA,
        label="Residência",
        required_deliverables=[
            RequiredDeliverable(key="produto_validado", label="Produto/Serviço Validado"),
            RequiredDeliverable(key="indicadores_tracao", label="Indicadores de Tração", approval_required=False),
        ],
        # Terminal stage: no passage rules, only maintenance
        maintenance_thresholds=Thresholds(
            weighted_score_min=8.0,
            dimension_mins={
                "mercado": 8.0,
                "perfil_empreendedor": 7.5,
                "tecnologia_qualidade": 7.5,
                "gestao": 7.2,
                "financeiro": 7.2,
            },
        ),
    ),
]


def main():
    store = get_config_store()
    store.db.create_tables()
    for program in PROGRAMS:
        store.save_program(program)
        print(f"Saved {program.key.value}: {program.display_label} "
              f"({len(program.required_deliverables)} deliverables)")
    print(f"\nDone: {len(PROGRAMS)} programs seeded.")


if __name__ == "__main__":
    main()
