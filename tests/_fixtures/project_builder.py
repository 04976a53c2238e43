"""Helper utilities for constructing temporary source projects in tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Mapping


class ProjectBuilder:
    """Utility for writing files into a throwaway source project."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()
        self.output = tmp_path / "out" / "migrated"

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def package(self, dependencies: Mapping[str, str] | None = None, **extra: object) -> None:
        """Write a package.json with the given dependencies."""
        data = {"name": "demo-app", "version": "0.1.0", "dependencies": dict(dependencies or {})}
        data.update(extra)
        (self.root / "package.json").write_text(json.dumps(data, indent=2), encoding="utf-8")

    def path(self) -> Path:
        """Return the project root path."""
        return self.root


LOVABLE_BUTTON = """
import React, { useState } from 'react';
import { LovableButton, LovableText as Label } from '@lovable-dev/ui';
import { formatPrice } from '../lib/format';
import './PriceButton.css';

interface PriceButtonProps {
  price: number;
  label?: string;
}

export const PriceButton = ({ price, label = 'Buy' }: PriceButtonProps) => {
  const [busy, setBusy] = useState(false);
  if (price <= 0) {
    return null;
  }
  return (
    <LovableButton onClick={() => setBusy(true)} disabled={busy}>
      <Label>{label}</Label> {formatPrice(price)}
    </LovableButton>
  );
};
"""

LOVABLE_CARD = """
import { LovableCard, LovableIcon } from '@lovable-dev/ui';
import { useState } from 'react';

export default function ProfileCard({ name, avatar }) {
  const [open, setOpen] = useState(false);
  return (
    <LovableCard>
      <LovableIcon name="user" />
      {open && <span>{name}</span>}
      {avatar ? <img src={avatar} /> : null}
    </LovableCard>
  );
}
"""

LOVABLE_PAGE = """
import { useAuth } from '../hooks/useAuth';
import { Layout } from '../components/Layout';
import { PriceButton } from '../components/PriceButton';

export const meta = { title: 'Pricing', description: 'Plans and pricing' };

export default function Pricing() {
  const { user } = useAuth();
  return (
    <Layout>
      <PriceButton price={10} />
    </Layout>
  );
}
"""


def lovable_project(builder: ProjectBuilder) -> ProjectBuilder:
    builder.package({"react": "^18.2.0", "@lovable-dev/ui": "^1.0.0", "tailwindcss": "^3.4.0"})
    builder.write(
        {
            "lovable.config.js": "module.exports = {};\n",
            "tsconfig.json": '{"compilerOptions": {"jsx": "react-jsx"}}\n',
            "src/components/PriceButton.tsx": LOVABLE_BUTTON,
            "src/components/PriceButton.test.tsx": """
            import { render } from '@testing-library/react';
            import { LovableButton } from '@lovable-dev/ui';
            import { PriceButton } from './PriceButton';

            test('renders', () => {
              render(<LovableButton><PriceButton price={1} /></LovableButton>);
            });
            """,
            "src/components/ProfileCard.jsx": LOVABLE_CARD,
            "src/pages/Pricing.tsx": LOVABLE_PAGE,
            "src/pages/index.tsx": """
            export default function Home() {
              return <main>Home</main>;
            }
            """,
            "src/styles/app.css": ":root {\n  --brand: #123456;\n}\n",
            "public/logo.svg": "<svg></svg>\n",
        }
    )
    return builder


BOLT_ROUTE = """
import type { LoaderFunctionArgs } from '@remix-run/node';
import { json } from '@remix-run/node';
import { Link, useLoaderData, useNavigate } from '@remix-run/react';
import { Button, Text } from '~/components/ui/button';
import { requireAuth } from '~/lib/auth.server';

export const meta = () => [{ title: 'User profile' }];

export async function loader({ params, request }: LoaderFunctionArgs) {
  await requireAuth(request);
  return json({ id: params.id });
}

export default function UserRoute() {
  const data = useLoaderData<typeof loader>();
  const navigate = useNavigate();
  return (
    <div>
      <Text>{data.id}</Text>
      <Link to="/users">Back</Link>
      <Button onClick={() => navigate('/')}>Home</Button>
    </div>
  );
}
"""

BOLT_HEADER = """
import { NavLink, useNavigation } from '@remix-run/react';
import { BoltCard } from '@bolt/components';

export function Header({ title }: { title: string }) {
  const navigation = useNavigation();
  return (
    <BoltCard>
      <NavLink to="/">{title}</NavLink>
      {navigation.state === 'loading' ? <span>...</span> : null}
    </BoltCard>
  );
}
"""


def bolt_project(builder: ProjectBuilder) -> ProjectBuilder:
    builder.package(
        {
            "@remix-run/node": "^2.0.0",
            "@remix-run/react": "^2.0.0",
            "react": "^18.2.0",
            "tailwindcss": "^3.4.0",
        }
    )
    builder.write(
        {
            "tsconfig.json": "{}\n",
            "app/root.tsx": "export default function App() { return null; }\n",
            "app/components/Header.tsx": BOLT_HEADER,
            "app/routes/_index.tsx": """
            export default function Index() {
              return <h1>Welcome</h1>;
            }
            """,
            "app/routes/users.$id.tsx": BOLT_ROUTE,
            "app/styles/tailwind.css": "@tailwind base;\n:root {\n  --radius: 4px;\n}\n",
        }
    )
    return builder


__all__ = [
    "BOLT_HEADER",
    "BOLT_ROUTE",
    "LOVABLE_BUTTON",
    "LOVABLE_CARD",
    "LOVABLE_PAGE",
    "ProjectBuilder",
    "bolt_project",
    "lovable_project",
]
