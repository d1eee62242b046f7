"""Application service: boutique registration, moderation and settings.

Moderation decides whether a boutique can take orders at all: checkout
refuses any cart holding products of a boutique that is not ``active``.
"""

from __future__ import annotations

import logging
import re
from datetime import date

from marketorders.domain.exceptions import EntityNotFoundError, ValidationError
from marketorders.domain.model.boutique import Boutique
from marketorders.domain.model.calendar import ClosureWindow, OpeningHours
from marketorders.domain.model.fees import FeeSchedule
from marketorders.domain.model.status import DeliveryMethod
from marketorders.domain.repository.boutique_repository import BoutiqueRepository

logger = logging.getLogger(__name__)


def _slug(nom: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", nom.lower()).strip("-")


class RegisterBoutiqueHandler:

    def __init__(self, boutique_repo: BoutiqueRepository) -> None:
        self._boutique_repo = boutique_repo

    def handle(
        self,
        nom: str,
        jours: list[str],
        boutique_id: str | None = None,
        livraison: bool = False,
        click_collect: bool = False,
        jour_j: bool = False,
    ) -> Boutique:
        """Register a boutique; it stays ``en_attente`` until approved."""
        if not nom or not nom.strip():
            raise ValidationError("Boutique name is required")
        new_id = boutique_id or _slug(nom)
        if not new_id:
            raise ValidationError(f"Cannot derive an id from name '{nom}'")
        if self._boutique_repo.get_by_id(new_id) is not None:
            raise ValidationError(f"Boutique '{new_id}' already exists")

        boutique = Boutique(
            id=new_id,
            nom=nom.strip(),
            livraison_status=livraison,
            click_collect_actif=click_collect,
            accepte_livraison_jour_j=jour_j,
            horaires=[OpeningHours(jour=j) for j in jours],
        )
        self._boutique_repo.save(boutique)
        logger.info("Boutique '%s' registered", new_id)
        return boutique


class ModerateBoutiqueHandler:
    """Admin decisions on a boutique: approve, suspend, reject."""

    def __init__(self, boutique_repo: BoutiqueRepository) -> None:
        self._boutique_repo = boutique_repo

    def approve(self, boutique_id: str) -> Boutique:
        boutique = _load(self._boutique_repo, boutique_id)
        boutique.approve()
        return self._save(boutique)

    def suspend(self, boutique_id: str, motif: str) -> Boutique:
        boutique = _load(self._boutique_repo, boutique_id)
        boutique.suspend(motif)
        return self._save(boutique)

    def reject(self, boutique_id: str, motif: str) -> Boutique:
        boutique = _load(self._boutique_repo, boutique_id)
        boutique.reject(motif)
        return self._save(boutique)

    def _save(self, boutique: Boutique) -> Boutique:
        self._boutique_repo.save(boutique)
        logger.info("Boutique '%s' is now %s", boutique.id, boutique.status.value)
        return boutique


class ConfigureBoutiqueHandler:
    """Closures and delivery fee of one boutique."""

    def __init__(self, boutique_repo: BoutiqueRepository) -> None:
        self._boutique_repo = boutique_repo

    def add_closure(
        self,
        boutique_id: str,
        debut: date,
        fin: date,
        raison: str = "",
        scope: DeliveryMethod | None = None,
        annuel: bool = False,
    ) -> Boutique:
        boutique = _load(self._boutique_repo, boutique_id)
        boutique.add_closure(ClosureWindow(debut, fin, raison, scope, annuel))
        self._boutique_repo.save(boutique)
        return boutique

    def set_delivery_fee(self, boutique_id: str, montant: str, fee_type: str) -> Boutique:
        boutique = _load(self._boutique_repo, boutique_id)
        boutique.set_delivery_fee(FeeSchedule.of(montant, fee_type))
        self._boutique_repo.save(boutique)
        return boutique

    def show(self, boutique_id: str) -> Boutique:
        return _load(self._boutique_repo, boutique_id)


def _load(repo: BoutiqueRepository, boutique_id: str) -> Boutique:
    boutique = repo.get_by_id(boutique_id)
    if boutique is None:
        raise EntityNotFoundError(f"Boutique not found: '{boutique_id}'")
    return boutique
