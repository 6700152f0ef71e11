"""Life-area registry: category tags, storage keys and default seeds."""

from __future__ import annotations

from lifeareas.models import AreaDefinition, Asset, Item


# ── Storage keys ──────────────────────────────────────────────

FISICA_GOALS_KEY = "fisica-goals"
FINANCE_GOALS_KEY = "financeira-goals"
FAMILIAR_GOALS_KEY = "familiar-goals"
FINANCE_ASSETS_KEY = "finance-assets"
REFLECTIONS_KEY = "unified-reflections"


# ── Areas ─────────────────────────────────────────────────────


AREAS: dict[str, AreaDefinition] = {
    "fisica": AreaDefinition(
        tag="fisica",
        name="Física",
        goals_key=FISICA_GOALS_KEY,
        default_goals=[
            Item(id="fisica-1", text="Realizar 30-45 minutos de exercício cardiovascular (Resistência)"),
            Item(id="fisica-2", text="Fazer um treino de força para os principais grupos musculares"),
            Item(id="fisica-3", text="Dedicar 10 minutos ao alongamento e mobilidade"),
            Item(id="fisica-4", text="Gerenciar estresse físico com uma pausa relaxante ou respiração profunda"),
            Item(id="fisica-5", text="Manter a hidratação adequada ao longo do dia"),
        ],
        empty_message="Nenhuma tarefa ou objetivo definido.",
    ),
    "financeira": AreaDefinition(
        tag="financeira",
        name="Financeira",
        goals_key=FINANCE_GOALS_KEY,
        default_goals=[
            Item(id="financeira-1", text="Registrar todas as despesas do dia"),
            Item(id="financeira-2", text="Revisar o orçamento semanal e ajustar se necessário"),
            Item(id="financeira-3", text="Transferir valor para a reserva de emergência"),
            Item(id="financeira-4", text="Estudar por 15 minutos sobre um tipo de investimento (ex: Tesouro Selic)"),
        ],
    ),
    "familiar": AreaDefinition(
        tag="familiar",
        name="Familiar",
        goals_key=FAMILIAR_GOALS_KEY,
        default_goals=[
            Item(id="familiar-1", text="Praticar escuta ativa em uma conversa com um familiar"),
            Item(id="familiar-2", text='Agendar um "tempo de qualidade" sem distrações (ex: noite de jogos, caminhada)'),
            Item(id="familiar-3", text="Expressar apreciação a um membro da família (antídoto para crítica)"),
            Item(id="familiar-4", text='Identificar e praticar uma das 5 "Linguagens do Amor" com um ente querido'),
        ],
        empty_message="Nenhum objetivo definido ainda.",
    ),
}


DEFAULT_ASSETS: list[Asset] = [
    Asset(id="default-1", name="Notebook", purchase_date="2014-01-01"),
    Asset(id="default-2", name="Geladeira", purchase_date="2015-01-01"),
    Asset(id="default-3", name="Cama de casal", purchase_date="2015-01-01"),
    Asset(id="default-4", name="Air fryer", purchase_date="2015-01-01"),
    Asset(id="default-5", name="Lancheira", purchase_date="2015-01-01"),
    Asset(id="default-6", name="Sofá", purchase_date="2025-01-01"),
    Asset(id="default-7", name="Video game (PS2, PS3, PS4)", purchase_date="2018-01-01"),
    Asset(id="default-8", name="Mesa escritório", purchase_date="2021-01-01"),
    Asset(id="default-9", name="Mesas de apoio", purchase_date="2022-01-01"),
    Asset(id="default-10", name="Banquetas vermelhas", purchase_date="2022-01-01"),
    Asset(id="default-11", name="Cama de solteiro", purchase_date="2022-01-01"),
    Asset(id="default-12", name="Fogão", purchase_date="2021-01-01"),
    Asset(id="default-13", name="Televisão", purchase_date="2022-01-01"),
]


def get_area(tag: str) -> AreaDefinition | None:
    return AREAS.get(tag)

