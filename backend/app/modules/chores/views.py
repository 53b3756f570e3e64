from app.modules.chores.models import Chore
from app.modules.chores.schemas import ChoreOut
from app.services.money import MoneyToFloat


def BuildChoreOut(chore: Chore) -> ChoreOut:
    return ChoreOut(
        Id=chore.Id,
        OwnerUserId=chore.OwnerUserId,
        Title=chore.Title,
        Description=chore.Description,
        PaymentAmount=MoneyToFloat(chore.PaymentAmount),
        Frequency=chore.FrequencyEnum,
        ChoreType=chore.TypeEnum.value,
        IsPrePopulated=bool(chore.IsPrePopulated),
        CreatedAt=chore.CreatedAt,
        UpdatedAt=chore.UpdatedAt,
    )
