"""
Fila Prioritária - seleção do próximo ticket de um setor.

Algoritmo puro (sem I/O e sem efeitos colaterais): recebe os tickets
candidatos e devolve o próximo elegível. Quem garante que os candidatos
refletem o estado confirmado mais recente é o use case, que os relê
com lock dentro da transação.

Ordem de despacho:
    1. Maior prioridade primeiro (PRIORITARIO antes de NORMAL)
    2. Dentro da mesma prioridade, criado_em mais antigo
    3. Empate exato de criado_em desempatado pelo id (ordem de string)
"""

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from .entities import TicketEntity, TicketPriority, TicketStatus


def chave_despacho(ticket: TicketEntity) -> Tuple[int, datetime, str]:
    """Chave de ordenação total dos tickets pendentes."""
    return (-ticket.prioridade.value, ticket.criado_em, ticket.id)


def chave_fifo(ticket: TicketEntity) -> Tuple[datetime, str]:
    return (ticket.criado_em, ticket.id)


class FilaPrioritaria:
    """
    Despachante: prioridade + FIFO.

    Attributes:
        respeitar_preferencia: Quando ligado, o ponto atende primeiro a
            faixa ``prioridade_preferida`` e só cai na ordem global
            quando essa faixa está vazia

    Example:
        fila = FilaPrioritaria()
        ticket = fila.proximo(tickets_do_setor)
        if ticket is None:
            ...  # fila vazia
    """

    def __init__(self, respeitar_preferencia: bool = False):
        self.respeitar_preferencia = respeitar_preferencia

    def ordenar(
        self,
        tickets: Iterable[TicketEntity],
        setor_id: Optional[str] = None,
    ) -> List[TicketEntity]:
        """
        Tickets pendentes na ordem de despacho.

        Args:
            tickets: Candidatos (tickets não pendentes são ignorados)
            setor_id: Restringe a um setor, se informado
        """
        pendentes = [
            t for t in tickets
            if t.status == TicketStatus.PENDENTE
            and (setor_id is None or t.setor_id == setor_id)
        ]
        return sorted(pendentes, key=chave_despacho)

    def proximo(
        self,
        tickets: Iterable[TicketEntity],
        setor_id: Optional[str] = None,
        prioridade_preferida: Optional[TicketPriority] = None,
    ) -> Optional[TicketEntity]:
        """
        Próximo ticket elegível.

        Returns:
            Ticket ou None se a fila estiver vazia
        """
        ordenados = self.ordenar(tickets, setor_id)
        if not ordenados:
            return None

        if self.respeitar_preferencia and prioridade_preferida is not None:
            da_faixa = [t for t in ordenados if t.prioridade == prioridade_preferida]
            if da_faixa:
                return min(da_faixa, key=chave_fifo)

        return ordenados[0]
