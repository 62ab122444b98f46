from creditmind.domain.models import LedgerSnapshot

DEFAULT_DATA = {
    "accounts": [
        {
            "id": 1,
            "name": "Maybank 2 Cards Gold",
            "accountType": "credit",
            "creditLimit": "20000",
            "statementDay": 21,
            "dueDay": 10,
            "benefits": {
                "rewardType": "cashback",
                "baseRate": "0.5",
                "rules": [
                    {"category": "Dining", "rate": "5"},
                    {"category": "Shopping", "rate": "5"},
                ],
                "monthlyCap": "50",
                "minSpend": "0",
            },
            "balance": "450.50",
            "color": "bg-yellow-500",
        },
        {
            "id": 2,
            "name": "ShopeePayLater",
            "accountType": "bnpl",
            "creditLimit": "3000",
            "statementDay": 1,
            "dueDay": 10,
            "benefits": {
                "rewardType": "points",
                "baseRate": "1",
                "rules": [{"category": "Shopping", "rate": "5"}],
                "monthlyCap": "0",
                "minSpend": "0",
            },
            "balance": "1200.00",
            "color": "bg-orange-500",
        },
        {
            "id": 3,
            "name": "Public Bank Quantum",
            "accountType": "credit",
            "creditLimit": "15000",
            "statementDay": 15,
            "dueDay": 5,
            "benefits": {
                "rewardType": "cashback",
                "baseRate": "0.2",
                "rules": [{"category": "Online", "rate": "5"}],
                "monthlyCap": "30",
                "minSpend": "0",
            },
            "balance": "0.00",
            "color": "bg-red-600",
        },
    ],
    "transactions": [
        {"id": 101, "date": "2024-03-25", "description": "Village Grocer", "amount": "150.00", "category": "Groceries", "accountId": 1},
        {"id": 102, "date": "2024-03-26", "description": "Shopee Order", "amount": "240.00", "category": "Shopping", "accountId": 2},
        {"id": 103, "date": "2024-03-27", "description": "Shell Petrol", "amount": "80.00", "category": "Transport", "accountId": 1},
        {"id": 104, "date": "2024-03-28", "description": "Uniqlo Midvalley", "amount": "129.90", "category": "Shopping", "accountId": 3},
    ],
}


def default_snapshot() -> LedgerSnapshot:
    return LedgerSnapshot.model_validate(DEFAULT_DATA)
