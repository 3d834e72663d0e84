"""
Sample EDMX documents shared by the test modules.
"""

EDMX_OPEN = (
    '<?xml version="1.0" encoding="utf-8"?>\n'
    '<edmx:Edmx Version="4.0" xmlns:edmx="http://docs.oasis-open.org/odata/ns/edmx">\n'
    '  <edmx:DataServices>\n'
    '    <Schema Namespace="Microsoft.NAV" xmlns="http://docs.oasis-open.org/odata/ns/edm">\n'
)

EDMX_CLOSE = (
    '    </Schema>\n'
    '  </edmx:DataServices>\n'
    '</edmx:Edmx>\n'
)


def edmx(body: str) -> bytes:
    """Wrap schema content into a complete Edmx document."""
    return (EDMX_OPEN + body + EDMX_CLOSE).encode('utf-8')


# A trimmed-down Business Central v2.0 API document
BUSINESS_CENTRAL = edmx('''
      <EntityType Name="company">
        <Key><PropertyRef Name="id" /></Key>
        <Property Name="id" Type="Edm.Guid" Nullable="false" />
        <Property Name="name" Type="Edm.String" Nullable="true" />
        <NavigationProperty Name="customers" Type="Collection(Microsoft.NAV.customer)" ContainsTarget="true" />
      </EntityType>
      <EntityType Name="customer">
        <Key><PropertyRef Name="id" /></Key>
        <Property Name="id" Type="Edm.Guid" Nullable="false" />
        <Property Name="number" Type="Edm.String" Nullable="true" />
        <Property Name="displayName" Type="Edm.String" Nullable="true" />
        <Property Name="balanceDue" Type="Edm.Decimal" Nullable="true" />
        <Property Name="blocked" Type="Microsoft.NAV.customerBlocked" Nullable="true" />
        <Property Name="lastModifiedDateTime" Type="Edm.DateTimeOffset" Nullable="true" />
        <NavigationProperty Name="company" Type="Microsoft.NAV.company" Partner="customers" />
        <NavigationProperty Name="salesOrders" Type="Collection(Microsoft.NAV.salesOrder)" Partner="customer" />
      </EntityType>
      <EntityType Name="salesOrder">
        <Key><PropertyRef Name="id" /></Key>
        <Property Name="id" Type="Edm.Guid" Nullable="false" />
        <Property Name="number" Type="Edm.String" Nullable="true" />
        <Property Name="orderDate" Type="Edm.Date" Nullable="true" />
        <Property Name="amount" Type="Edm.Decimal" Nullable="false" />
        <Property Name="fullyShipped" Type="Edm.Boolean" Nullable="true" />
        <Property Name="sellingPostalAddress" Type="Microsoft.NAV.postalAddressType" />
        <NavigationProperty Name="customer" Type="Microsoft.NAV.customer" Partner="salesOrders" />
        <NavigationProperty Name="salesOrderLines" Type="Collection(Microsoft.NAV.salesOrderLine)" ContainsTarget="true" Partner="salesOrder" />
      </EntityType>
      <EntityType Name="salesOrderLine">
        <Key><PropertyRef Name="id" /></Key>
        <Property Name="id" Type="Edm.Guid" Nullable="false" />
        <Property Name="sequence" Type="Edm.Int32" Nullable="true" />
        <Property Name="quantity" Type="Edm.Decimal" Nullable="true" />
        <NavigationProperty Name="salesOrder" Type="Microsoft.NAV.salesOrder" Partner="salesOrderLines" />
      </EntityType>
      <EntityType Name="item">
        <Key><PropertyRef Name="id" /></Key>
        <Property Name="id" Type="Edm.Guid" Nullable="false" />
      </EntityType>
      <ComplexType Name="postalAddressType">
        <Property Name="street" Type="Edm.String" Nullable="true" />
        <Property Name="city" Type="Edm.String" Nullable="true" />
      </ComplexType>
      <EnumType Name="customerBlocked">
        <Member Name="_x0020_" Value="0" />
        <Member Name="Ship" Value="1" />
      </EnumType>
      <EntityContainer Name="NAV">
        <EntitySet Name="companies" EntityType="Microsoft.NAV.company" />
        <EntitySet Name="customers" EntityType="Microsoft.NAV.customer" />
      </EntityContainer>
''')


EXPECTED_BUSINESS_CENTRAL_TS = '''import { z } from "zod";

// Branded primitive types
const Guid = z.string().brand<"Guid">();
const DateTime = z.string().brand<"DateTime">();
const DateOnly = z.string().brand<"DateOnly">();

// Generic reference types
const RefOne = z.object({ id: Guid });
const RefMany = z.array(RefOne);

export type RefOne = z.infer<typeof RefOne>;
export type RefMany = z.infer<typeof RefMany>;

export const Customer = z.object({
  id: Guid,
  number: z.string().optional(),
  displayName: z.string().optional(),
  balanceDue: z.number().optional(),
  lastModifiedDateTime: DateTime.optional(),
  company: RefOne.optional(),
  salesOrders: RefMany.optional(),
});

export type Customer = z.infer<typeof Customer>;

export const SalesOrder = z.object({
  id: Guid,
  number: z.string().optional(),
  orderDate: DateOnly.optional(),
  amount: z.number(),
  fullyShipped: z.boolean().optional(),
  customer: RefOne.optional(),
  salesOrderLines: RefMany.optional(),
});

export type SalesOrder = z.infer<typeof SalesOrder>;

export const SalesOrderLine = z.object({
  id: Guid,
  sequence: z.number().int().optional(),
  quantity: z.number().optional(),
  salesOrder: RefOne.optional(),
});

export type SalesOrderLine = z.infer<typeof SalesOrderLine>;

export type CustomerCreate = {
  id?: string;
  displayName?: string;
  balanceDue?: number;
};

export type CustomerUpdate = {
  displayName?: string;
  balanceDue?: number;
};

export type SalesOrderCreate = {
  id?: string;
  orderDate?: string;
  amount?: number;
  fullyShipped?: boolean;
};

export type SalesOrderUpdate = {
  orderDate?: string;
  amount?: number;
  fullyShipped?: boolean;
};

export type SalesOrderLineCreate = {
  id?: string;
  sequence?: number;
  quantity?: number;
};

export type SalesOrderLineUpdate = {
  sequence?: number;
  quantity?: number;
};

'''
