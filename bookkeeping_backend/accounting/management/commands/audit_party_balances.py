# accounting/management/commands/audit_party_balances.py

from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand, CommandError
from django.db.models import F, Sum

from accounting.money import STATUS_PAID, ZERO, q2
from customers.models import Customer, Receivable
from vendors.models import Payable, Vendor


def _outstanding_by_party(model, party_field: str) -> dict:
    rows = (
        model.objects.exclude(status=STATUS_PAID)
        .values(f"{party_field}_id")
        .annotate(outstanding=Sum(F("amount") - F("paid_amount")))
    )
    return {r[f"{party_field}_id"]: q2(r["outstanding"]) for r in rows}


class Command(BaseCommand):
    help = (
        "Compare customer / vendor balances with their open receivables / payables "
        "and report parties whose balance exceeds what their documents justify."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--tolerance",
            default="0.00",
            help="Ignore differences up to this amount (default 0.00)",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail (non-zero exit) if any mismatch is found.",
        )

    def handle(self, *args, **options):
        try:
            tolerance = q2(Decimal(str(options.get("tolerance") or "0")))
        except ArithmeticError as exc:
            raise CommandError("Invalid --tolerance. Use a decimal amount") from exc

        strict = bool(options.get("strict"))

        self.stdout.write(self.style.MIGRATE_HEADING("Party balance audit"))

        problems = 0
        problems += self._audit(
            label="customers",
            parties=Customer.objects.order_by("id").values_list("id", "name", "balance"),
            outstanding=_outstanding_by_party(Receivable, "customer"),
            tolerance=tolerance,
        )
        problems += self._audit(
            label="vendors",
            parties=Vendor.objects.order_by("id").values_list("id", "name", "balance"),
            outstanding=_outstanding_by_party(Payable, "vendor"),
            tolerance=tolerance,
        )

        self.stdout.write("")
        if problems == 0:
            self.stdout.write(self.style.SUCCESS("[OK] Every party balance is backed by open documents"))
        else:
            self.stderr.write(self.style.ERROR(f"[FAIL] {problems} party balance(s) exceed open documents"))

        if strict and problems:
            raise CommandError(f"{problems} mismatch(es) found")

    def _audit(self, *, label, parties, outstanding, tolerance) -> int:
        """
        A balance may sit BELOW the open total (advance credit lowers it), but
        never above it.
        """
        mismatches = []
        for party_id, name, balance in parties:
            expected = outstanding.get(party_id, ZERO)
            excess = q2(balance) - expected
            if excess > tolerance:
                mismatches.append((party_id, name, q2(balance), expected, excess))

        if not mismatches:
            self.stdout.write(self.style.SUCCESS(f"[OK] {label}: no excess balances"))
            return 0

        self.stderr.write(self.style.ERROR(f"[FAIL] {label}: {len(mismatches)} excess balance(s)"))
        for party_id, name, balance, expected, excess in mismatches[:20]:
            self.stderr.write(
                f"  id={party_id} name={name!r} balance={balance} open={expected} excess={excess}"
            )
        return len(mismatches)
