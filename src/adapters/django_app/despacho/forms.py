"""
Django Forms para validação de entrada da API do despacho.

Forms são DRIVING ADAPTERS: validam a forma do payload (campos
obrigatórios, tipos) antes de montar os DTOs. Regras de negócio ficam
nas Entities/Use Cases.
"""

from typing import Any, Dict, Mapping, Type

from django import forms

from src.core.shared.exceptions import ValidationError

from .models import PrioridadeChoices


class CriarTicketForm(forms.Form):
    """Form para colocar um ticket na fila."""

    cliente_id = forms.CharField(
        max_length=36,
        error_messages={'required': 'cliente_id é obrigatório'},
    )

    setor_id = forms.CharField(
        max_length=36,
        error_messages={'required': 'setor_id é obrigatório'},
    )

    prioridade = forms.TypedChoiceField(
        choices=PrioridadeChoices.choices,
        coerce=int,
        required=False,
        empty_value=PrioridadeChoices.NORMAL,
        error_messages={'invalid_choice': 'Prioridade inválida (use 0 ou 1)'},
    )


class IniciarOperacaoForm(forms.Form):
    usuario_id = forms.CharField(
        max_length=64,
        error_messages={'required': 'usuario_id é obrigatório'},
    )

    ponto_atendimento_id = forms.CharField(
        max_length=36,
        error_messages={'required': 'ponto_atendimento_id é obrigatório'},
    )

    def clean_usuario_id(self):
        return self.cleaned_data['usuario_id'].strip()


class PausarOperacaoForm(forms.Form):
    # Aceita valor ("lunch") ou nome ("ALMOCO"); quem decide é o Use Case
    motivo = forms.CharField(
        max_length=32,
        error_messages={'required': 'motivo é obrigatório'},
    )


class FinalizarAtendimentoForm(forms.Form):
    """
    Form para finalizar atendimento.

    ``metadados`` é repassado sem interpretação no evento de finalização.
    """

    tipo_resolucao = forms.CharField(
        max_length=32,
        error_messages={'required': 'tipo_resolucao é obrigatório'},
    )

    metadados = forms.JSONField(required=False)

    def clean_metadados(self):
        metadados = self.cleaned_data.get('metadados')
        if metadados is None:
            return {}
        if not isinstance(metadados, dict):
            raise forms.ValidationError('metadados deve ser um objeto JSON')
        return metadados


class UltimosChamadosForm(forms.Form):
    limite = forms.IntegerField(required=False, min_value=1, max_value=50)


class MetricasProfissionalForm(forms.Form):
    """Período opcional; só filtra quando início e fim são informados."""

    inicio = forms.DateTimeField(required=False)
    fim = forms.DateTimeField(required=False)

    def clean(self):
        cleaned = super().clean()
        inicio = cleaned.get('inicio')
        fim = cleaned.get('fim')

        if inicio and fim and inicio > fim:
            raise forms.ValidationError('inicio deve ser anterior a fim')

        return cleaned


def validar_form(form_class: Type[forms.Form], data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Valida ``data`` com o form e devolve ``cleaned_data``.

    Raises:
        ValidationError: Primeiro erro do form, com o campo correspondente
    """
    form = form_class(data=data)
    if form.is_valid():
        return form.cleaned_data

    campo, erros = next(iter(form.errors.items()))
    raise ValidationError(
        erros[0],
        field=None if campo == '__all__' else campo,
    )
